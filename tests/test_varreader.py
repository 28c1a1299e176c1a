import pytest

from sharedcockpit.memwriter import MemWriter
from sharedcockpit.util import InDataTypes
from sharedcockpit.varreader import VarReader


def test_read():
    definitions = VarReader()
    definitions.add_definition("PLANE LATITUDE", InDataTypes.F64)
    definitions.add_definition("PLANE LONGITUDE", InDataTypes.F64)

    writer = MemWriter(64, 4)
    writer.write_i32(0)
    writer.write_f64(42.0)
    writer.write_i32(1)
    writer.write_f64(128.0)

    value = definitions.read_from_bytes(len(definitions), writer.getvalue())
    assert value["PLANE LATITUDE"] == 42.0
    assert value["PLANE LONGITUDE"] == 128.0

    definitions.add_definition("ELT ACTIVATED", InDataTypes.BOOL)
    definitions.add_definition("Some enum", InDataTypes.I32)
    definitions.add_definition("Some big enum", InDataTypes.I64)

    writer.write_i32(2)
    writer.write_bool(False)
    writer.write_i32(3)
    writer.write_i32(1)
    writer.write_i32(4)
    writer.write_i64(3)

    value = definitions.read_from_bytes(len(definitions), writer.getvalue())
    assert value["ELT ACTIVATED"] is False
    assert value["Some enum"] == 1
    assert value["Some big enum"] == 3

    writer.write_i32(100)
    writer.write_bool(False)

    with pytest.raises(ValueError):
        definitions.read_from_bytes(len(definitions) + 1, writer.getvalue())


def test_write_and_read_back():
    definitions = VarReader()
    definitions.add_definition("PLANE LATITUDE", InDataTypes.F64)
    definitions.add_definition("PLANE LONGITUDE", InDataTypes.F64)

    data = definitions.write_to_data({"PLANE LATITUDE": 42.0, "PLANE LONGITUDE": 128.0})

    values = definitions.read_from_bytes(len(definitions), data)
    assert values["PLANE LATITUDE"] == 42.0
    assert values["PLANE LONGITUDE"] == 128.0


def test_add_definition_returns_sequential_ids():
    definitions = VarReader()
    assert definitions.add_definition("A", InDataTypes.F64) == 0
    assert definitions.add_definition("B", InDataTypes.I32) == 1
    assert len(definitions) == 2


def test_true_bool_read():
    definitions = VarReader()
    definitions.add_definition("SWITCH", InDataTypes.BOOL)
    writer = MemWriter(16, 4)
    writer.write_i32(0)
    writer.write_bool(True)
    assert definitions.read_from_bytes(1, writer.getvalue()) == {"SWITCH": True}


def test_truncated_data_raises():
    definitions = VarReader()
    definitions.add_definition("A", InDataTypes.F64)
    writer = MemWriter(4, 4)
    writer.write_i32(0)
    with pytest.raises(ValueError):
        definitions.read_from_bytes(1, writer.getvalue())


def test_write_unknown_name_raises():
    definitions = VarReader()
    with pytest.raises(KeyError):
        definitions.write_to_data({"MISSING": 1.0})
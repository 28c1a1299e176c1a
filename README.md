# sharedcockpit

Components for sharing one flight-simulator cockpit between several pilots:
encoding and decoding simulator variables, building the binary blocks sent to
an in-sim gauge, mapping sim events, handing control over, applying received
values to the simulator, keeping user settings and checking for updates.

## Install

```
pip install sharedcockpit
```

For running the tests:

```
pip install "sharedcockpit[test]"
pytest
```

## Modules

- `sharedcockpit.util`: `wrap_diff` (signed difference on a scale that wraps,
  such as a 360° heading), `NumberDigits` (decimal digits, ones place first,
  missing places read as 0), `Vector3`, the `InDataTypes` and `Category` enums,
  and `get_hostname_ip`, which resolves a host name to its first IPv4 or IPv6
  address and raises `MismatchingIpVersionError` when there is none.
- `sharedcockpit.memwriter`: `MemWriter`, a fixed-size, zero-filled,
  little-endian byte buffer with `write_bool`, `write_u32`, `write_i32`,
  `write_i64`, `write_f64`, `write_str`, `pad` and `getvalue`. Writing or
  padding outside the buffer raises `ValueError`.
- `sharedcockpit.config`: `Config`, the settings dataclass (update rate,
  connection timeout, port, ip, name, theme and other flags), with
  `Config.read_from_file`, `write_to_file` and `to_json`. Problems reading,
  parsing or writing raise `ConfigLoadError`.
- `sharedcockpit.varreader`: `VarReader`, which assigns datum ids to variable
  names and reads and writes tagged data (a u32 datum id followed by the value).
- `sharedcockpit.jscommunicator`: `JSCommunicator`, a WebSocket server
  (by default on `0.0.0.0:7780`) that panel gauges connect to. `poll()` returns
  the next received `JSMessage` or `None`; `write_payload` sends to one named
  instrument or to all. The payload types are `Interaction`, `Handshake`,
  `Input`, `Time` and `RequestTime`, converted with `payload_to_json` and
  `payload_from_json`. It can be used as a context manager.
- `sharedcockpit.gaugecommunicator`: `GaugeCommunicator`, which builds the
  client-data blocks for setting variables, sending calculator strings and
  definitions, sending interpolation targets and decoding returned values
  (`process_client_data`). Also `format_get`, `InterpolationType`, `GetResult`,
  `InterpolateData` and `LVar`.
- `sharedcockpit.transfer`: `Events` (two-way mapping between sim event names
  and ids), `LVarSyncer` (local variables through the gauge, remembering the
  last values received) and `AircraftVars` (aircraft variables under one data
  definition).
- `sharedcockpit.control`: `Control`, which freezes position, altitude and
  attitude when we are not in control and unfreezes them when we are.
- `sharedcockpit.syncdefs`: the `Syncable` interface and its mappings
  `ToggleSwitch`, `NumSet`, `NumIncrement`, `NumDigitSet`, `CustomCalculator`,
  `LocalVarProxy`, `MultiplyDifferenceLocalVarSet` and `ResetWhenEquals`.
- `sharedcockpit.update`: `Updater`, which fetches the latest release tag as a
  `semver.Version` (cached after the first call), reports the running version,
  and downloads, unpacks and starts an installer. Release and installer URLs
  and the unpack directory are constructor arguments; failures raise
  `DownloadInstallerError`.

## Example

```python
from sharedcockpit.util import InDataTypes, wrap_diff
from sharedcockpit.varreader import VarReader

reader = VarReader()
reader.add_definition("PLANE LATITUDE", InDataTypes.F64)
reader.add_definition("PLANE LONGITUDE", InDataTypes.F64)

blob = reader.write_to_data({"PLANE LATITUDE": 42.0, "PLANE LONGITUDE": 128.0})
values = reader.read_from_bytes(len(reader), blob)
assert values["PLANE LATITUDE"] == 42.0

assert wrap_diff(350.0, 10.0, 360.0) == 20.0
```

## Connecting to the simulator

The simulator connection itself is not part of this package. Anything passed
as `conn` only needs the methods the components call on it, such as
`transmit_client_event`, `set_client_data`, `map_client_event_to_sim_event`
and `add_data_definition`. A test double works as well as a real connection.

## What this package does not do

- It does not connect to the simulator; you supply the `conn` object.
- It has no networking between pilots: no server, client, session hosting or
  relay. Only the local WebSocket link to panel gauges is included.
- It has no user interface and installs no command; it is a library to build
  such a program on.
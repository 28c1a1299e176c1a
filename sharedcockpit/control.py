"""Freezing and unfreezing the aircraft as control passes between pilots."""

_FREEZE_EVENTS = {
    1000: "FREEZE_LATITUDE_LONGITUDE_SET",
    1001: "FREEZE_ALTITUDE_SET",
    1002: "FREEZE_ATTITUDE_SET",
}
_GROUP_ID = 5
_FBW_OVERRIDE = "L:A32NX_EXTERNAL_OVERRIDE"


class Control:
    """Tracks whether we fly the aircraft and freezes it when we do not."""

    def __init__(self):
        self._has_control = False

    def do_transfer(self, conn):
        """Freeze position, altitude and attitude unless we are in control."""
        frozen = 0 if self._has_control else 1
        for event_id in _FREEZE_EVENTS:
            conn.transmit_client_event(1, event_id, frozen, _GROUP_ID, 0)

    def take_control(self, conn, gauge_communicator):
        self._has_control = True
        self.do_transfer(conn)
        gauge_communicator.stop_interpolation(conn)
        gauge_communicator.set(conn, _FBW_OVERRIDE, None, "0")

    def lose_control(self, conn, gauge_communicator):
        self._has_control = False
        self.do_transfer(conn)
        gauge_communicator.set(conn, _FBW_OVERRIDE, None, "1")

    def has_control(self):
        return self._has_control

    def on_connected(self, conn):
        for event_id, event_name in _FREEZE_EVENTS.items():
            conn.map_client_event_to_sim_event(event_id, event_name)
"""Ways of applying a synchronised value to the simulator."""

import abc
import math
from decimal import Decimal

from .util import NumberDigits, wrap_diff

GROUP_ID = 5
EVENT_FLAG_GROUPID_IS_PRIORITY = 0x10

_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1
_U32_MASK = 0xFFFFFFFF


def _format_number(value):
    """Render a number the way calculator strings expect: no exponent, no '.0'."""
    if isinstance(value, bool) or not isinstance(value, float):
        return str(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value.is_integer():
        if value == 0 and math.copysign(1.0, value) < 0:
            return "-0"
        return str(int(value))
    text = repr(value)
    if "e" in text or "E" in text:
        text = format(Decimal(text), "f")
    return text


def _to_event_data(value):
    """Truncate to a 32-bit signed integer and reinterpret it as unsigned."""
    try:
        as_int = int(value)
    except (ValueError, OverflowError) as e:
        raise ValueError(f"{value!r} cannot be sent as event data") from e
    if not _I32_MIN <= as_int <= _I32_MAX:
        raise ValueError(f"{value!r} does not fit in a 32-bit integer")
    return as_int & _U32_MASK


class Syncable(abc.ABC):
    """Something that tracks a current value and applies new ones to the sim."""

    @abc.abstractmethod
    def set_current(self, current):
        """Record the value the simulator currently holds."""

    @abc.abstractmethod
    def set_new(self, new, conn, lvar_transfer):
        """Apply a value received from another pilot."""


class ToggleSwitch(Syncable):
    """A switch flipped by one event, or by separate on and off events."""

    def __init__(
        self,
        event_id,
        off_event_id=None,
        event_param=None,
        event_name=None,
        switch_on=False,
        on_condition_value=1.0,
    ):
        self.event_id = event_id
        self.off_event_id = off_event_id
        self.event_param = event_param
        self.event_name = None if event_name is None else f"K:{event_name}"
        self.switch_on = switch_on
        self.on_condition_value = on_condition_value
        self.current = False

    def _is_on(self, value):
        if isinstance(value, bool):
            return value
        return value == self.on_condition_value

    def set_current(self, current):
        self.current = self._is_on(current)

    def set_new(self, new, conn, lvar_transfer):
        new = self._is_on(new)
        if self.current == new:
            return
        if not new and self.switch_on:
            return

        if self.event_name is not None:
            value_string = "" if self.event_param is None else str(self.event_param)
            lvar_transfer.set_unchecked(conn, self.event_name, None, value_string)
            return

        if self.off_event_id is not None and not new:
            event_id = self.off_event_id
        else:
            event_id = self.event_id
        data = 0 if self.event_param is None else self.event_param
        conn.transmit_client_event(1, event_id, data, GROUP_ID, 0)


class NumSet(Syncable):
    """Sets a number directly through an event or a calculator key event."""

    def __init__(
        self,
        event_id,
        event_name=None,
        with_param=False,
        event_param=None,
        index_reversed=False,
        swap_event_id=None,
        multiply_by=None,
        add_by=None,
        is_user_event=False,
    ):
        self.event_id = event_id
        if event_name is None:
            self.event_name = None
        elif with_param:
            self.event_name = f"K:2:{event_name}"
        else:
            self.event_name = f"K:{event_name}"
        self.event_param = event_param
        self.index_reversed = index_reversed
        self.swap_event_id = swap_event_id
        self.multiply_by = multiply_by
        self.add_by = add_by
        self.is_user_event = is_user_event
        self.current = 0

    def set_current(self, current):
        self.current = current

    def set_new(self, new, conn, lvar_transfer):
        if new == self.current:
            return

        object_id = 0 if self.is_user_event else 1

        value = new
        if self.multiply_by is not None:
            value = value * self.multiply_by
        if self.add_by is not None:
            value = value + self.add_by

        if self.event_name is not None:
            formatted = _format_number(value)
            if self.event_param is None:
                value_string = formatted
            elif self.index_reversed:
                value_string = f"{formatted} {self.event_param}"
            else:
                value_string = f"{self.event_param} {formatted}"
            lvar_transfer.set_unchecked(conn, self.event_name, None, value_string)
        else:
            conn.transmit_client_event(
                object_id,
                self.event_id,
                _to_event_data(value),
                GROUP_ID,
                EVENT_FLAG_GROUPID_IS_PRIORITY,
            )

        if self.swap_event_id is not None:
            conn.transmit_client_event(
                object_id,
                self.swap_event_id,
                0,
                GROUP_ID,
                EVENT_FLAG_GROUPID_IS_PRIORITY,
            )


class NumIncrement(Syncable):
    """Reaches a value by stepping up and down events."""

    def __init__(
        self,
        up_event_id,
        down_event_id,
        is_user_event,
        increment_amount,
        pass_difference=False,
    ):
        if not pass_difference and increment_amount <= 0:
            raise ValueError("increment_amount must be positive")
        self.up_event_id = up_event_id
        self.down_event_id = down_event_id
        self.is_user_event = is_user_event
        self.increment_amount = increment_amount
        self.pass_difference = pass_difference
        self.current = 0

    def set_current(self, current):
        self.current = current

    def _send(self, conn, event_id, data):
        object_id = 0 if self.is_user_event else 1
        conn.transmit_client_event(
            object_id, event_id, data, GROUP_ID, EVENT_FLAG_GROUPID_IS_PRIORITY
        )

    def set_new(self, new, conn, lvar_transfer):
        if self.pass_difference:
            if new > self.current:
                self._send(conn, self.up_event_id, _to_event_data(new - self.current))
            elif new < self.current:
                self._send(conn, self.down_event_id, _to_event_data(self.current - new))
            return

        working = self.current
        while working > new:
            working -= self.increment_amount
            self._send(conn, self.down_event_id, 0)
        while working < new:
            working += self.increment_amount
            self._send(conn, self.up_event_id, 0)


class NumDigitSet(Syncable):
    """Sets a number digit by digit, one increment/decrement event pair per place."""

    def __init__(self, inc_event_ids, dec_event_ids):
        if len(inc_event_ids) != len(dec_event_ids):
            raise ValueError("need as many decrement events as increment events")
        self.inc_event_ids = list(inc_event_ids)
        self.dec_event_ids = list(dec_event_ids)
        self.current = NumberDigits(0)

    def set_current(self, current):
        self.current = NumberDigits(current)

    def set_new(self, new, conn, lvar_transfer):
        new_digits = NumberDigits(new)
        for index, (inc_id, dec_id) in enumerate(
            zip(self.inc_event_ids, self.dec_event_ids)
        ):
            target = new_digits.get(index)
            working = self.current.get(index)
            while working > target:
                working -= 1
                conn.transmit_client_event(1, dec_id, 0, GROUP_ID, 0)
            while working < target:
                working += 1
                conn.transmit_client_event(1, inc_id, 0, GROUP_ID, 0)


class CustomCalculator(Syncable):
    """Runs a fixed calculator string whenever the value changes."""

    def __init__(self, set_string):
        self.set_string = set_string
        self.current = 0.0

    def set_current(self, current):
        self.current = current

    def set_new(self, new, conn, lvar_transfer):
        if self.current == new:
            return
        lvar_transfer.send_raw(conn, self.set_string)


class LocalVarProxy(Syncable):
    """Writes the value into another local variable, and optionally a loopback."""

    def __init__(self, target, loopback_var=None):
        self.target = target
        self.loopback_var = loopback_var

    def set_current(self, current):
        pass

    def set_new(self, new, conn, lvar_transfer):
        value_string = _format_number(new)
        lvar_transfer.set(conn, self.target, value_string)
        if self.loopback_var is not None:
            lvar_transfer.set(conn, self.loopback_var, value_string)


class MultiplyDifferenceLocalVarSet(Syncable):
    """Writes the scaled, wrap-aware change between values into a local variable."""

    def __init__(self, target, multiply_by, max_val, loopback_var=None):
        self.target = target
        self.multiply_by = multiply_by
        self.max_val = max_val
        self.loopback_var = loopback_var
        self.current = 0.0

    def set_current(self, current):
        self.current = current

    def set_new(self, new, conn, lvar_transfer):
        change = wrap_diff(self.current, new, self.max_val) * self.multiply_by
        lvar_transfer.set(conn, self.target, _format_number(change))
        if self.loopback_var is not None:
            lvar_transfer.set(conn, self.loopback_var, _format_number(new))


class ResetWhenEquals(Syncable):
    """Triggers once, then waits for one of the reset values before triggering again."""

    def __init__(self, target, equals):
        self.target = target
        self.equals = list(equals)
        self.did_trigger = False

    def set_current(self, current):
        if current in self.equals:
            self.did_trigger = False

    def set_new(self, new, conn, lvar_transfer):
        if new in self.equals:
            self.did_trigger = False
            return
        if self.did_trigger:
            return
        self.did_trigger = True
        lvar_transfer.set(conn, self.target, "1.0")
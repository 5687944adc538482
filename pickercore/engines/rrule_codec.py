"""Recurrence Rule Codec - RecurrenceModel <-> RRULE-style text.

This engine is the only component that reads or writes the textual rule:
- parse_rule(): grammar → RuleParts (raw fields, nothing interpreted)
- check_parts(): editor-expressibility checks on RuleParts
- decode(): text → RecurrenceModel
- encode(): RecurrenceModel → text
- is_representable(): same checks as decode, no model built

The grammar accepted is broader than what the editor can show. A rule that
parses but cannot be edited raises UnsupportedRuleShapeError; callers keep
such a rule as an opaque, already-chosen value.

ARCHITECTURE: Pure Python, stateless, static methods only.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, NoReturn

from .. import const
from ..models import DateValue
from ..utils.dt_utils import (
    constrain,
    format_until,
    parse_until,
    weekday_code,
    weekday_index,
)
from .recurrence_engine import RecurrenceModel, is_supported_nth_weekday

if TYPE_CHECKING:
    from ..type_defs import ByDayEntry, RuleParts


# BYDAY token: optional signed ordinal followed by a weekday code ("2TU", "-1FR")
_BYDAY_PATTERN = re.compile(r"^([+-]?\d{1,2})?(SU|MO|TU|WE|TH|FR|SA)$")
# Largest |ordinal| the grammar allows in BYDAY (weeks per year)
_MAX_BYDAY_ORDINAL = 53
_MAX_MONTH_DAY = 31
# Non-standard parts the grammar reserves for extensions
_EXTENSION_PREFIX = "X-"


# =============================================================================
# EXCEPTIONS
# =============================================================================


class UnsupportedRuleShapeError(Exception):
    """Raised when a rule cannot be represented by RecurrenceModel.

    Recoverable: the caller keeps the rule as an opaque custom value.

    Attributes:
        rule: The rule text as given
        reason: One of const.RULE_REJECT_*
        detail: Human-readable description of the offending part
    """

    def __init__(self, rule: str, reason: str, detail: str = "") -> None:
        """Initialize UnsupportedRuleShapeError."""
        self.rule = rule
        self.reason = reason
        self.detail = detail
        message = f"Unsupported rule '{rule}': {reason}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class RuleSyntaxError(UnsupportedRuleShapeError):
    """Raised when a rule is not well-formed in the grammar at all."""

    def __init__(self, rule: str, detail: str) -> None:
        """Initialize RuleSyntaxError."""
        super().__init__(rule, const.RULE_REJECT_SYNTAX, detail)


class InvalidModelStateError(Exception):
    """Raised when encoding a model that violates its own invariants.

    This is a caller error: the editor is expected to keep the model
    consistent and only encode once is_confirmable() holds.

    Attributes:
        model: The offending model
        reason: One of const.MODEL_ERROR_*
    """

    def __init__(self, model: RecurrenceModel, reason: str) -> None:
        """Initialize InvalidModelStateError."""
        self.model = model
        self.reason = reason
        super().__init__(f"Cannot encode recurrence model: {reason}")


# =============================================================================
# CODEC
# =============================================================================


class RecurrenceRuleCodec:
    """Bidirectional mapping between RecurrenceModel and rule text.

    All methods are static. Nothing is cached.
    """

    # -------------------------------------------------------------------------
    # Parsing
    # -------------------------------------------------------------------------

    @staticmethod
    def parse_rule(rule: str) -> RuleParts:
        """Parse rule text into raw parts without judging expressibility.

        Accepts an optional "RRULE:" prefix. Keys are case-insensitive.
        Known-but-unused parts (BYMONTH, BYSETPOS, ...) and X- extensions
        are collected in `ignored`.

        Raises:
            RuleSyntaxError: If the text is not well-formed
        """
        text = rule.strip()
        if text.upper().startswith(const.RRULE_PREFIX):
            text = text[len(const.RRULE_PREFIX) :]

        parts: RuleParts = {
            "freq": "",
            "interval": const.INTERVAL_DEFAULT,
            "until": None,
            "count": 0,
            "wkst": None,
            "byday": [],
            "bymonthday": [],
            "ignored": [],
        }
        seen: set[str] = set()

        for chunk in text.split(const.RRULE_PART_SEPARATOR):
            if not chunk.strip():
                continue
            key, sep, value = chunk.partition("=")
            key = key.strip().upper()
            value = value.strip()
            if not sep or not key or not value:
                raise RuleSyntaxError(rule, f"malformed part '{chunk}'")
            if key in seen:
                raise RuleSyntaxError(rule, f"duplicate part '{key}'")
            seen.add(key)

            if key == const.RRULE_FREQ:
                freq = value.upper()
                if freq not in const.RRULE_KNOWN_FREQUENCIES:
                    raise RuleSyntaxError(rule, f"unknown frequency '{value}'")
                parts["freq"] = freq
            elif key == const.RRULE_INTERVAL:
                parts["interval"] = _parse_positive_int(rule, key, value)
            elif key == const.RRULE_COUNT:
                parts["count"] = _parse_positive_int(rule, key, value)
            elif key == const.RRULE_UNTIL:
                try:
                    parse_until(value)
                except ValueError as err:
                    raise RuleSyntaxError(rule, f"bad UNTIL '{value}'") from err
                parts["until"] = value
            elif key == const.RRULE_WKST:
                try:
                    parts["wkst"] = weekday_code(weekday_index(value))
                except ValueError as err:
                    raise RuleSyntaxError(rule, f"bad WKST '{value}'") from err
            elif key == const.RRULE_BYDAY:
                parts["byday"] = [
                    _parse_byday_token(rule, token)
                    for token in value.split(const.RRULE_VALUE_SEPARATOR)
                ]
            elif key == const.RRULE_BYMONTHDAY:
                parts["bymonthday"] = [
                    _parse_month_day(rule, token)
                    for token in value.split(const.RRULE_VALUE_SEPARATOR)
                ]
            elif key in const.RRULE_IGNORED_PARTS or key.startswith(_EXTENSION_PREFIX):
                parts["ignored"].append(key)
            else:
                raise RuleSyntaxError(rule, f"unknown part '{key}'")

        if not parts["freq"]:
            raise RuleSyntaxError(rule, "missing FREQ")
        if parts["ignored"]:
            const.LOGGER.debug(
                "Rule '%s': ignoring parts the editor cannot carry: %s",
                rule,
                parts["ignored"],
            )
        return parts

    @staticmethod
    def check_parts(rule: str, parts: RuleParts) -> None:
        """Reject parsed parts the editor cannot represent.

        Raises:
            UnsupportedRuleShapeError: With the first failing reason
        """
        freq = parts["freq"]
        if freq not in const.RRULE_TO_FREQUENCY:
            raise UnsupportedRuleShapeError(rule, const.RULE_REJECT_FREQUENCY, freq)
        if parts["count"] and parts["until"] is not None:
            raise UnsupportedRuleShapeError(rule, const.RULE_REJECT_COUNT_AND_UNTIL)

        nth_entries = [entry for entry in parts["byday"] if entry["nth"] != 0]
        if len(nth_entries) > 1:
            raise UnsupportedRuleShapeError(
                rule, const.RULE_REJECT_MULTIPLE_NTH_WEEKDAYS
            )
        for entry in nth_entries:
            if not is_supported_nth_weekday(entry["nth"]):
                raise UnsupportedRuleShapeError(
                    rule, const.RULE_REJECT_UNSUPPORTED_NTH, str(entry["nth"])
                )
        if nth_entries and freq != const.RRULE_FREQ_MONTHLY:
            raise UnsupportedRuleShapeError(
                rule, const.RULE_REJECT_NTH_WEEKDAY_NOT_MONTHLY
            )

        if len(parts["bymonthday"]) > 1:
            raise UnsupportedRuleShapeError(rule, const.RULE_REJECT_MULTIPLE_MONTH_DAYS)
        for day in parts["bymonthday"]:
            if day < 1:
                raise UnsupportedRuleShapeError(
                    rule, const.RULE_REJECT_UNSUPPORTED_MONTH_DAY, str(day)
                )

        if freq == const.RRULE_FREQ_MONTHLY and parts["byday"]:
            if parts["bymonthday"]:
                raise UnsupportedRuleShapeError(rule, const.RULE_REJECT_MONTHLY_MIXED)
            if len(parts["byday"]) > 1:
                raise UnsupportedRuleShapeError(
                    rule, const.RULE_REJECT_MONTHLY_MULTIPLE_WEEKDAYS
                )
            if not nth_entries:
                raise UnsupportedRuleShapeError(
                    rule, const.RULE_REJECT_MONTHLY_WEEKDAY_WITHOUT_NTH
                )

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    @staticmethod
    def is_representable(rule: str) -> bool:
        """True if decode() would succeed for this rule."""
        try:
            parts = RecurrenceRuleCodec.parse_rule(rule)
            RecurrenceRuleCodec.check_parts(rule, parts)
        except UnsupportedRuleShapeError as err:
            const.LOGGER.debug("Rule not representable: %s", err)
            return False
        return True

    @staticmethod
    def decode(rule: str) -> RecurrenceModel:
        """Map rule text onto a new ACTIVE RecurrenceModel.

        INTERVAL above 99 and COUNT above 730 are clamped to the editor's
        limits. UNTIL keeps only its date part.

        Raises:
            RuleSyntaxError: If the text is not well-formed
            UnsupportedRuleShapeError: If the rule cannot be edited
        """
        parts = RecurrenceRuleCodec.parse_rule(rule)
        try:
            RecurrenceRuleCodec.check_parts(rule, parts)
        except UnsupportedRuleShapeError as err:
            const.LOGGER.debug("Rejected rule '%s': %s", rule, err.reason)
            raise

        model = RecurrenceModel(state=const.RECURRENCE_STATE_ACTIVE)
        model.freq = const.RRULE_TO_FREQUENCY[parts["freq"]]
        model.interval = constrain(
            parts["interval"], const.INTERVAL_MIN, const.INTERVAL_MAX
        )

        if parts["until"] is not None:
            year, month, day = parse_until(parts["until"])
            model.end = const.END_BY_DATE
            model.end_date = DateValue(year, month, day)
        elif parts["count"]:
            model.end = const.END_BY_COUNT
            model.end_count = constrain(
                parts["count"], const.COUNT_MIN, const.COUNT_MAX
            )
        else:
            model.end = const.END_NEVER

        if model.freq == const.FREQUENCY_WEEKLY:
            for entry in parts["byday"]:
                model.weekly_by_day[entry["weekday"]] = True
        elif model.freq == const.FREQUENCY_MONTHLY:
            if parts["byday"]:
                entry = parts["byday"][0]
                model.monthly_mode = const.MONTHLY_BY_NTH_WEEKDAY
                model.monthly_by_weekday = entry["weekday"]
                model.monthly_by_nth_weekday = entry["nth"]
            else:
                model.monthly_mode = const.MONTHLY_BY_MONTH_DAY
                if parts["bymonthday"]:
                    model.monthly_by_month_day = parts["bymonthday"][0]
        elif parts["byday"] or parts["bymonthday"]:
            const.LOGGER.debug(
                "Rule '%s': BYDAY/BYMONTHDAY not editable for %s, ignored",
                rule,
                parts["freq"],
            )

        if (
            model.interval != parts["interval"]
            or (parts["count"] and model.end_count != parts["count"])
        ):
            const.LOGGER.debug("Rule '%s': clamped to editor limits", rule)
        return model

    @staticmethod
    def encode(
        model: RecurrenceModel, week_start: str = const.DEFAULT_WEEK_START
    ) -> str:
        """Serialize an ACTIVE model to rule text.

        Part order: FREQ, UNTIL, COUNT, INTERVAL, WKST, BYDAY, BYMONTHDAY.
        INTERVAL is omitted when it is 1. Weekly BYDAY lists checked days in
        Sunday-first order without ordinals.

        Args:
            model: Model to encode
            week_start: WKST code ("SU", "MO", ...)

        Raises:
            InvalidModelStateError: If the model breaks its invariants
            ValueError: If week_start is not a weekday code
        """
        wkst = weekday_code(weekday_index(week_start))

        if model.state != const.RECURRENCE_STATE_ACTIVE:
            _reject_model(model, const.MODEL_ERROR_NO_RECURRENCE)

        parts = [f"{const.RRULE_FREQ}={const.FREQUENCY_TO_RRULE[model.freq]}"]

        if model.end == const.END_BY_DATE:
            end_date = model.end_date
            if end_date is None:
                _reject_model(model, const.MODEL_ERROR_END_DATE_MISSING)
            until = format_until(end_date.year, end_date.month, end_date.day)
            parts.append(f"{const.RRULE_UNTIL}={until}")
        elif model.end == const.END_BY_COUNT:
            if model.end_count <= 0:
                _reject_model(model, const.MODEL_ERROR_COUNT_NOT_POSITIVE)
            parts.append(f"{const.RRULE_COUNT}={model.end_count}")

        if model.interval > 1:
            parts.append(f"{const.RRULE_INTERVAL}={model.interval}")
        parts.append(f"{const.RRULE_WKST}={wkst}")

        if model.freq == const.FREQUENCY_WEEKLY:
            codes = [
                weekday_code(index)
                for index, checked in enumerate(model.weekly_by_day)
                if checked
            ]
            if codes:
                parts.append(
                    f"{const.RRULE_BYDAY}={const.RRULE_VALUE_SEPARATOR.join(codes)}"
                )
        elif model.freq == const.FREQUENCY_MONTHLY:
            if model.monthly_mode == const.MONTHLY_BY_NTH_WEEKDAY:
                nth = model.monthly_by_nth_weekday
                if not is_supported_nth_weekday(nth):
                    _reject_model(model, const.MODEL_ERROR_UNSUPPORTED_NTH)
                code = weekday_code(model.monthly_by_weekday)
                parts.append(f"{const.RRULE_BYDAY}={nth}{code}")
            elif model.monthly_by_month_day > 0:
                parts.append(
                    f"{const.RRULE_BYMONTHDAY}={model.monthly_by_month_day}"
                )

        rule = const.RRULE_PART_SEPARATOR.join(parts)
        if not RecurrenceRuleCodec.is_representable(rule):
            _reject_model(model, const.MODEL_ERROR_UNREPRESENTABLE)
        const.LOGGER.debug("Encoded recurrence model as '%s'", rule)
        return rule


# =============================================================================
# HELPERS
# =============================================================================


def _reject_model(model: RecurrenceModel, reason: str) -> NoReturn:
    """Log and raise InvalidModelStateError."""
    const.LOGGER.warning("Refusing to encode invalid recurrence model: %s", reason)
    raise InvalidModelStateError(model, reason)


def _parse_positive_int(rule: str, key: str, value: str) -> int:
    if not value.isdigit() or int(value) < 1:
        raise RuleSyntaxError(rule, f"{key} must be a positive integer, got '{value}'")
    return int(value)


def _parse_byday_token(rule: str, token: str) -> ByDayEntry:
    """Parse '2TU' / '-1FR' / 'MO' into a ByDayEntry (nth 0 = no ordinal)."""
    match = _BYDAY_PATTERN.match(token.strip().upper())
    if match is None:
        raise RuleSyntaxError(rule, f"bad BYDAY token '{token}'")
    ordinal, code = match.groups()
    nth = int(ordinal) if ordinal else 0
    if ordinal and (nth == 0 or abs(nth) > _MAX_BYDAY_ORDINAL):
        raise RuleSyntaxError(rule, f"bad BYDAY ordinal '{token}'")
    return {"weekday": weekday_index(code), "nth": nth}


def _parse_month_day(rule: str, token: str) -> int:
    """Parse one BYMONTHDAY value (-31..-1 or 1..31)."""
    text = token.strip()
    try:
        day = int(text)
    except ValueError as err:
        raise RuleSyntaxError(rule, f"bad BYMONTHDAY '{token}'") from err
    if day == 0 or abs(day) > _MAX_MONTH_DAY:
        raise RuleSyntaxError(rule, f"bad BYMONTHDAY '{token}'")
    return day

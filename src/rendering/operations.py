from __future__ import annotations

import json
from typing import Any, Callable

_RESERVED_KEYS = ("address", "operation")


class OperationFormatError(ValueError):
    pass


def _address_pairs(address: Any) -> list[tuple[str, str]]:
    # Accept both [{"subsystem": "x"}, {"k": "v"}] and {"subsystem": "x", "k": "v"}.
    if address is None:
        return []
    if isinstance(address, dict):
        return [(str(k), _scalar(v)) for k, v in address.items()]
    if isinstance(address, list):
        pairs: list[tuple[str, str]] = []
        for element in address:
            if isinstance(element, dict):
                pairs.extend((str(k), _scalar(v)) for k, v in element.items())
            elif isinstance(element, list) and len(element) == 2:
                pairs.append((str(element[0]), _scalar(element[1])))
            else:
                raise OperationFormatError(f"Unsupported address element: {element!r}")
        return pairs
    raise OperationFormatError(f"Unsupported address: {address!r}")


def _scalar(v: Any) -> str:
    if isinstance(v, bool):
        return "true" if v else "false"
    return str(v)


def _param_value(v: Any) -> str:
    if isinstance(v, (dict, list)):
        return json.dumps(v, ensure_ascii=False, separators=(",", ":"))
    s = _scalar(v)
    if s.startswith("$"):
        # Expressions must not be resolved by the CLI that reads the output.
        s = "\\" + s
    return f'"{s}"'


def format_operation(op: dict[str, Any]) -> str:
    """
    Render a management operation as a CLI command:
    /k1=v1/k2=v2:operation(param="value",list=[...])
    """

    if "operation" not in op:
        raise OperationFormatError("Operation record has no 'operation' key")

    out = ["/"]
    out.append("/".join(f"{k}={v}" for k, v in _address_pairs(op.get("address"))))
    out.append(":" + _scalar(op["operation"]))

    params = [(k, v) for k, v in op.items() if k not in _RESERVED_KEYS and v is not None]
    if params:
        out.append("(" + ",".join(f"{k}={_param_value(v)}" for k, v in params) + ")")
    return "".join(out)


def format_operation_line(line: str) -> str:
    try:
        op = json.loads(line)
    except json.JSONDecodeError as e:
        raise OperationFormatError(f"Line is not JSON: {e.msg}") from e
    if not isinstance(op, dict):
        raise OperationFormatError("Operation line must be a JSON object")
    return format_operation(op)


def lenient(formatter: Callable[[str], str]) -> Callable[[str], str]:
    """Wrap a formatter so lines it cannot interpret are emitted unchanged."""

    def _format(line: str) -> str:
        try:
            return formatter(line)
        except OperationFormatError:
            return line

    return _format

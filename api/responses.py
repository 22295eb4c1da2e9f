"""
JSON response that keeps Decimal amounts exact.

Starlette's JSONResponse goes through the stdlib json module, which can only
write a Decimal as a float or a string. simplejson writes it as a JSON number
with its own digits, so 1236825000.00 reaches the client as 1236825000.00.
"""

import typing

import simplejson
from fastapi.responses import JSONResponse


class DecimalJSONResponse(JSONResponse):
    def render(self, content: typing.Any) -> bytes:
        return simplejson.dumps(
            content,
            use_decimal=True,
            ensure_ascii=False,
            allow_nan=False,
            separators=(",", ":"),
        ).encode("utf-8")

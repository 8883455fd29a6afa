"""JSON-RPC 2.0 request/response models."""
from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr
from typing import Any, Dict, List, Literal, Optional, Union

JSON_RPC_VERSION = "2.0"

# Name of the protocol version member on the wire
VERSION_FIELD = "protocolVersion"

RequestId = Optional[Union[StrictStr, StrictInt, StrictFloat]]


class JSONRPCRequest(BaseModel):
    """JSON-RPC 2.0 request model.

    Only built from payloads that already passed ``validate_request``.
    """

    model_config = ConfigDict(populate_by_name=True)

    jsonrpc: Literal["2.0"] = Field(default=JSON_RPC_VERSION, alias=VERSION_FIELD)
    method: str
    params: Optional[Union[List[Any], Dict[str, Any]]] = None
    id: RequestId = None

    @property
    def is_notification(self) -> bool:
        """A request without an ``id`` member never gets a reply."""
        return "id" not in self.model_fields_set


class JSONRPCError(BaseModel):
    """JSON-RPC 2.0 error model."""

    code: int
    message: str
    data: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class JSONRPCResponse(BaseModel):
    """JSON-RPC 2.0 response model.

    Exactly one of ``result`` and ``error`` is sent; ``result`` may be null.
    """

    jsonrpc: Literal["2.0"] = JSON_RPC_VERSION
    id: RequestId
    result: Optional[Any] = None
    error: Optional[JSONRPCError] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {VERSION_FIELD: self.jsonrpc}
        if self.error is not None:
            data["error"] = self.error.to_dict()
        else:
            data["result"] = self.result
        data["id"] = self.id
        return data

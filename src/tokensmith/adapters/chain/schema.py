"""Pydantic models describing JSON-RPC payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, model_validator


class JsonRpcBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class JsonRpcError(JsonRpcBaseModel):
    code: int
    message: str


class JsonRpcResponse(JsonRpcBaseModel):
    jsonrpc: str = "2.0"
    id: int | str | None = None
    result: str | None = None
    error: JsonRpcError | None = None

    @model_validator(mode="after")
    def _require_outcome(self) -> JsonRpcResponse:
        if self.result is None and self.error is None:
            raise ValueError("JSON-RPC response has neither result nor error")
        return self

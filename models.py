# models.py
# Request / response shapes for /execute
from dataclasses import dataclass
from typing import Dict, List, Optional, Union

# Every cell decodes to exactly one of these
Value = Union[None, bool, int, float, str, bytes]

# One row: column name -> value, in the cursor's column order
Record = Dict[str, Value]


@dataclass
class QueryRequest:
    query: str

    @classmethod
    def from_json(cls, body) -> Optional["QueryRequest"]:
        """Returns None when the body is not an object with a string `query`."""
        if not isinstance(body, dict):
            return None
        query = body.get("query")
        if not isinstance(query, str):
            return None
        return cls(query=query)


@dataclass
class QueryResponse:
    result: Optional[List[Record]] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        # error is left out entirely on success
        if self.error:
            return {"result": None, "error": self.error}
        return {"result": self.result if self.result is not None else []}

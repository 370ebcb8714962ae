# domain/request.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class PortalRequest:
    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    form_list: Optional[List[Tuple[str, str]]] = None  # 同名キー複数OK
    json_body: Optional[Dict[str, Any]] = None

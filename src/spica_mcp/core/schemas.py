"""Pydantic argument types for nested tool inputs.

Only the shapes the tools themselves rely on are modelled; bucket
properties, bucket records, identity attributes and function documents
stay open `Dict[str, Any]` maps owned by Spica.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel


class BucketAcl(BaseModel):
    read: str
    write: str


class PolicyResource(BaseModel):
    include: Optional[List[str]] = None
    exclude: Optional[List[str]] = None


class PolicyStatement(BaseModel):
    action: str
    module: str
    resource: Optional[PolicyResource] = None

from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional
from datetime import datetime


class ProductDetail(BaseModel):
    model_config = ConfigDict(extra="allow")

    priceOptions: List[Dict[str, Any]] = Field(default_factory=list)


class ProductPayloadDetail(BaseModel):
    model_config = ConfigDict(extra="allow")

    priceOptions: Optional[List[Dict[str, Any]]] = None


class ProductPayload(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    name: Optional[str] = None
    brand: Optional[str] = None
    category: Optional[str] = None
    size: Optional[str] = None
    image: Optional[str] = None
    alt: Optional[str] = None
    featured: Optional[bool] = None
    detail: Optional[ProductPayloadDetail] = None


class Product(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    name: str
    brand: str
    category: Optional[str] = None
    size: Optional[str] = None
    image: Optional[str] = None
    alt: Optional[str] = None
    featured: Optional[bool] = False
    detail: ProductDetail = Field(default_factory=ProductDetail)
    createdAt: datetime
    updatedAt: datetime


class DeleteResponse(BaseModel):
    ok: bool = True


class ApiInfo(BaseModel):
    message: str
    version: str


class StatusResponse(BaseModel):
    status: str
    message: str

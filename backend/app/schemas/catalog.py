"""Schemas for the master catalog and user-owned catalog entries."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict


class MasterItemCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    code: Optional[str] = None
    name: str
    description: str
    category: str
    unit_of_measure: str
    default_price: Optional[Decimal] = None


class MasterItemUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    code: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    unit_of_measure: Optional[str] = None
    default_price: Optional[Decimal] = None
    is_active: Optional[bool] = None


class MasterItemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    code: Optional[str] = None
    name: str
    description: str
    category: str
    unit_of_measure: str
    default_price: Optional[Decimal] = None
    is_active: bool
    created_at: Optional[datetime] = None


class MasterTermCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    category: str
    title: str
    content: str


class MasterTermUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    category: Optional[str] = None
    title: Optional[str] = None
    content: Optional[str] = None
    is_active: Optional[bool] = None


class MasterTermRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    category: str
    title: str
    content: str
    is_active: bool
    created_at: Optional[datetime] = None


class CompanyItemCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    master_item_id: Optional[int] = None
    code: Optional[str] = None
    name: str
    description: str
    category: str
    unit_of_measure: str
    price: Decimal
    cost: Optional[Decimal] = None


class CompanyItemUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    code: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    unit_of_measure: Optional[str] = None
    price: Optional[Decimal] = None
    cost: Optional[Decimal] = None
    is_active: Optional[bool] = None


class CompanyItemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    master_item_id: Optional[int] = None
    code: Optional[str] = None
    name: str
    description: str
    category: str
    unit_of_measure: str
    price: Decimal
    cost: Optional[Decimal] = None
    is_active: bool


class CompanyTermCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    master_term_id: Optional[int] = None
    category: str
    title: str
    content: str
    is_default: bool = False


class CompanyTermUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    category: Optional[str] = None
    title: Optional[str] = None
    content: Optional[str] = None
    is_default: Optional[bool] = None


class CompanyTermRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    master_term_id: Optional[int] = None
    category: str
    title: str
    content: str
    is_default: bool

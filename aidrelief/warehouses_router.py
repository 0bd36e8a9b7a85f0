from typing import List

from fastapi import APIRouter, Depends

from aidrelief import warehouse_store
from aidrelief.firebase_admin_client import get_db
from aidrelief.schemas import Warehouse

router = APIRouter()


@router.get("", response_model=List[Warehouse])
def list_warehouses(db=Depends(get_db)):
    return warehouse_store.list_warehouses(db)


@router.get("/{warehouse_id}", response_model=Warehouse)
def get_warehouse(warehouse_id: str, db=Depends(get_db)):
    return warehouse_store.get_warehouse(db, warehouse_id)

"""
MongoDB access for repair planning.

Reads candidate technicians and parts, and writes finished work orders.
Driver errors are logged and re-raised unchanged: the planner does no local
recovery or retry.
"""

import re
from typing import Any, Dict, Iterable, List, Optional

from pymongo import ASCENDING
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError

from config import PlannerSettings
from models.inventory_models import Part, Technician
from models.work_order_models import WorkOrder
from services.logger_singleton import LoggerSingleton

logger = LoggerSingleton.get_logger(__name__)


def _exact_ignore_case(values: Iterable[str]) -> List[re.Pattern]:
    """Anchored case-insensitive patterns, for $in matches on tag fields"""
    return [re.compile(f"^{re.escape(value)}$", re.IGNORECASE) for value in values]


def _without_object_id(document: Dict[str, Any]) -> Dict[str, Any]:
    data = dict(document)
    stored_id = data.pop("_id", None)
    if not data.get("id") and stored_id is not None:
        data["id"] = str(stored_id)
    return data


class RepairStore:
    """Technicians, PartsInventory and WorkOrders collections"""

    def __init__(
        self,
        db: AsyncDatabase,
        technicians_collection: str = "Technicians",
        parts_collection: str = "PartsInventory",
        work_orders_collection: str = "WorkOrders",
    ):
        self.db = db
        self.technicians = db[technicians_collection]
        self.parts = db[parts_collection]
        self.work_orders = db[work_orders_collection]

    @classmethod
    def from_settings(cls, db: AsyncDatabase, settings: PlannerSettings) -> "RepairStore":
        return cls(
            db,
            technicians_collection=settings.technicians_collection,
            parts_collection=settings.parts_collection,
            work_orders_collection=settings.work_orders_collection,
        )

    async def find_available_technicians(self, required_skills: Iterable[str]) -> List[Technician]:
        """
        Available technicians holding at least one of the required skills,
        least loaded first. Order among equal workloads is whatever the
        database returns and is not guaranteed.
        """
        skills = sorted(set(required_skills))
        if not skills:
            return []

        logger.info(f"Querying technicians with skills: {', '.join(skills)}")
        query = {"available": True, "skills": {"$in": _exact_ignore_case(skills)}}
        try:
            cursor = self.technicians.find(query).sort("currentWorkloadHours", ASCENDING)
            documents = await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error(f"MongoDB error while querying technicians: {e}")
            raise

        technicians = []
        for document in documents:
            technician = Technician.model_validate(_without_object_id(document))
            if technician.available and technician.has_any_skill(skills):
                technicians.append(technician)

        logger.info(f"Found {len(technicians)} available technicians matching required skills")
        return technicians

    async def find_parts(self, part_numbers: Iterable[str]) -> List[Part]:
        """
        Parts whose part number is in the requested set. Numbers with no
        inventory record are left out and logged, not raised.
        """
        requested = sorted(set(part_numbers))
        if not requested:
            logger.info("No part numbers provided, returning empty list")
            return []

        logger.info(f"Fetching parts: {', '.join(requested)}")
        try:
            cursor = self.parts.find({"partNumber": {"$in": _exact_ignore_case(requested)}})
            documents = await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error(f"MongoDB error while fetching parts: {e}")
            raise

        wanted = {number.lower() for number in requested}
        parts = [
            part for part in (Part.model_validate(_without_object_id(d)) for d in documents)
            if part.part_number.lower() in wanted
        ]

        logger.info(f"Found {len(parts)} parts out of {len(requested)} requested")
        found = {part.part_number.lower() for part in parts}
        missing = [number for number in requested if number.lower() not in found]
        if missing:
            logger.warning(f"Parts not found in inventory: {', '.join(missing)}")

        return parts

    async def create_work_order(self, work_order: WorkOrder) -> WorkOrder:
        """Insert a finished work order. status is the shard key and must be set."""
        if not work_order.id:
            raise ValueError("Work order id must be assigned before it is stored")
        if not work_order.status:
            raise ValueError("Work order status is the shard key and must not be empty")

        document = work_order.to_document()
        try:
            await self.work_orders.insert_one(document)
        except PyMongoError as e:
            logger.error(f"MongoDB error while creating work order {work_order.work_order_number}: {e}")
            raise

        logger.info(
            f"Work order {work_order.work_order_number} stored for machine {work_order.machine_id} "
            f"(status={work_order.status})"
        )
        return WorkOrder.from_document(document)

    async def get_work_order(self, work_order_id: str) -> Optional[WorkOrder]:
        try:
            document = await self.work_orders.find_one({"_id": work_order_id})
        except PyMongoError as e:
            logger.error(f"MongoDB error while reading work order {work_order_id}: {e}")
            raise

        if document is None:
            return None
        return WorkOrder.from_document(document)

# -*- coding: utf-8 -*-
# @file story_service.py
# @brief Story-level rules layered over the storage gateway
# @author sailing-innocent
# @date 2026-10-19

import logging
from typing import Dict, Iterable, List

from sqlalchemy import delete, or_
from sqlalchemy.ext.asyncio import AsyncSession

from scriptorium.data.errors import RelationshipRuleError
from scriptorium.data.schemas import LocationRecord, RelationshipRecord
from scriptorium.model import Character, Relationship
from scriptorium.service.cascade import CascadeBatch
from scriptorium.service.storage_service import StorageGateway

logger = logging.getLogger(__name__)


class StoryService:
    """Service for relationships, characters and locations.

    The gateway itself stores whatever it is given; the rules below
    (no self-links, one relationship per pair, reference clean-up on delete)
    belong to the callers and live here.
    """

    def __init__(self, gateway: StorageGateway):
        self.gateway = gateway

    # ============ Relationship Methods ============

    async def add_relationship(self, relationship: RelationshipRecord) -> RelationshipRecord:
        """Save a relationship unless it links a character to itself or
        duplicates an existing pair in the same project.

        Saving a record whose id already exists updates it in place, so the
        record never conflicts with its own earlier version.
        """
        if relationship.from_id == relationship.to_id:
            raise RelationshipRuleError("A character cannot have a relationship with itself")

        store = self.gateway.relationships

        async def operation(session: AsyncSession) -> RelationshipRecord:
            existing = await store.fetch_all(session, relationship.project_id, "project_id")
            for other in existing:
                if other.id != relationship.id and other.pair() == relationship.pair():
                    raise RelationshipRuleError(
                        f"Characters {relationship.from_id} and {relationship.to_id} "
                        "already have a relationship"
                    )
            return await store.put(session, relationship)

        saved = await self.gateway.run("add relationship", operation, write=True)
        logger.debug("Saved relationship %s", saved.id)
        return saved

    async def relationships_of(self, character_id: str, project_id: str) -> List[RelationshipRecord]:
        relationships = await self.gateway.relationships.get_all(project_id, "project_id")
        return [r for r in relationships if character_id in (r.from_id, r.to_id)]

    # ============ Character Methods ============

    async def delete_character(self, character_id: str, project_id: str) -> int:
        """Delete a character together with every relationship touching it"""
        batch = CascadeBatch(f"delete character {character_id}")
        batch.add(
            delete(Relationship).where(
                Relationship.project_id == project_id,
                or_(
                    Relationship.from_id == character_id,
                    Relationship.to_id == character_id,
                ),
            )
        )
        batch.delete_where(Character, "id", character_id)
        return await self.gateway.commit_batch(batch)

    # ============ Location Methods ============

    async def delete_location(self, location_id: str, project_id: str) -> int:
        """Delete a location and drop its id from events and other locations.

        Returns:
            Number of records touched, the location itself included
        """
        locations = self.gateway.locations
        events = self.gateway.world_events

        async def operation(session: AsyncSession) -> int:
            touched = 0
            for event in await events.fetch_all(session, project_id, "project_id"):
                if location_id in event.location_ids:
                    event.location_ids = [i for i in event.location_ids if i != location_id]
                    await events.put(session, event)
                    touched += 1
            for location in await locations.fetch_all(session, project_id, "project_id"):
                if location.id != location_id and location_id in location.connections:
                    location.connections = [
                        i for i in location.connections if i != location_id
                    ]
                    await locations.put(session, location)
                    touched += 1
            if await locations.remove(session, location_id):
                touched += 1
            return touched

        touched = await self.gateway.run(
            f"delete location {location_id}", operation, write=True
        )
        logger.info("delete location %s touched %d records", location_id, touched)
        return touched

    @staticmethod
    def connected_locations(
        location: LocationRecord, all_locations: Iterable[LocationRecord]
    ) -> List[LocationRecord]:
        """Locations linked to location in either direction.

        Ids that no longer resolve to a stored location are skipped.
        """
        by_id: Dict[str, LocationRecord] = {loc.id: loc for loc in all_locations}
        neighbour_ids = set(location.connections)
        for other in by_id.values():
            if location.id in other.connections:
                neighbour_ids.add(other.id)
        neighbour_ids.discard(location.id)
        return [by_id[i] for i in sorted(neighbour_ids) if i in by_id]

import pytest

from scriptorium.data.errors import RelationshipRuleError
from scriptorium.data.schemas import (
    CharacterRecord,
    LocationRecord,
    ProjectRecord,
    RelationshipRecord,
    WorkspaceRecord,
    WorldEventRecord,
)
from scriptorium.service.story_service import StoryService

SCOPE = {"workspace_id": "W1", "project_id": "P1", "book_id": "B1"}


def _character(character_id: str) -> CharacterRecord:
    return CharacterRecord(id=character_id, name=character_id, **SCOPE)


def _relationship(from_id: str, to_id: str, **kwargs) -> RelationshipRecord:
    return RelationshipRecord(from_id=from_id, to_id=to_id, **SCOPE, **kwargs)


def _location(location_id: str, connections=()) -> LocationRecord:
    return LocationRecord(id=location_id, name=location_id, connections=list(connections), **SCOPE)


def test_deleting_character_removes_its_relationships(run_with_gateway):
    async def scenario(gateway):
        service = StoryService(gateway)
        await gateway.workspaces.save(WorkspaceRecord(id="W1", name="W1"))
        await gateway.projects.save(ProjectRecord(id="P1", workspace_id="W1", name="P1"))
        await gateway.characters.save(_character("C1"))
        await gateway.characters.save(_character("C2"))
        await service.add_relationship(_relationship("C1", "C2", id="R1", type="ally", strength=80))

        await service.delete_character("C1", "P1")

        characters = await gateway.characters.get_all("P1", "project_id")
        relationships = await gateway.relationships.get_all("P1", "project_id")
        bundle = await gateway.export_project("P1")
        return characters, relationships, bundle

    characters, relationships, bundle = run_with_gateway(scenario)
    assert [c.id for c in characters] == ["C2"]
    assert relationships == []
    assert len(bundle.characters) == 1
    assert len(bundle.relationships) == 0
    assert bundle.project.id == "P1"


def test_second_relationship_over_same_pair_is_rejected(run_with_gateway):
    async def scenario(gateway):
        service = StoryService(gateway)
        await service.add_relationship(_relationship("C1", "C2", type="ally"))
        with pytest.raises(RelationshipRuleError):
            await service.add_relationship(_relationship("C1", "C2", type="rival"))
        # direction does not matter
        with pytest.raises(RelationshipRuleError):
            await service.add_relationship(_relationship("C2", "C1", type="enemy"))
        return await gateway.relationships.get_all("P1")

    relationships = run_with_gateway(scenario)
    assert len(relationships) == 1
    assert relationships[0].type == "ally"


def test_relationship_can_be_updated_in_place(run_with_gateway):
    async def scenario(gateway):
        service = StoryService(gateway)
        first = await service.add_relationship(_relationship("C1", "C2", strength=10))
        await service.add_relationship(first.model_copy(update={"strength": 95}))
        return await gateway.relationships.get_all("P1")

    relationships = run_with_gateway(scenario)
    assert [r.strength for r in relationships] == [95]


def test_self_relationship_is_rejected_before_the_store(run_with_gateway):
    async def scenario(gateway):
        service = StoryService(gateway)
        with pytest.raises(RelationshipRuleError):
            await service.add_relationship(_relationship("C1", "C1"))
        return gateway.state

    # the store was never opened
    assert run_with_gateway(scenario) == "uninitialized"


def test_same_pair_in_other_project_is_allowed(run_with_gateway):
    async def scenario(gateway):
        service = StoryService(gateway)
        await service.add_relationship(_relationship("C1", "C2"))
        other = RelationshipRecord(
            from_id="C1", to_id="C2", workspace_id="W1", project_id="P2", book_id="B9"
        )
        await service.add_relationship(other)
        return await service.relationships_of("C1", "P2")

    assert len(run_with_gateway(scenario)) == 1


def test_deleting_location_prunes_references(run_with_gateway):
    async def scenario(gateway):
        service = StoryService(gateway)
        await gateway.locations.save(_location("L1", connections=["L2"]))
        await gateway.locations.save(_location("L2", connections=["L1", "L3"]))
        await gateway.locations.save(_location("L3"))
        await gateway.world_events.save(
            WorldEventRecord(id="E1", name="Siege", location_ids=["L1", "L3"], **SCOPE)
        )
        await gateway.world_events.save(WorldEventRecord(id="E2", name="Fair", **SCOPE))

        touched = await service.delete_location("L1", "P1")
        locations = {loc.id: loc for loc in await gateway.locations.get_all("P1")}
        events = {e.id: e for e in await gateway.world_events.get_all("P1")}
        return touched, locations, events

    touched, locations, events = run_with_gateway(scenario)
    assert touched == 3
    assert sorted(locations) == ["L2", "L3"]
    assert locations["L2"].connections == ["L3"]
    assert events["E1"].location_ids == ["L3"]
    assert events["E2"].location_ids == []


def test_connected_locations_are_undirected_and_skip_dangling_ids():
    harbor = _location("harbor", connections=["market", "lighthouse-ruins"])
    market = _location("market")
    keep = _location("keep", connections=["harbor"])
    island = _location("island")

    neighbours = StoryService.connected_locations(harbor, [harbor, market, keep, island])
    assert [loc.id for loc in neighbours] == ["keep", "market"]
    assert StoryService.connected_locations(island, [harbor, market, keep, island]) == []


def test_event_importance_maps_to_stars():
    stars = [WorldEventRecord(name="e", importance=i, **SCOPE).stars() for i in range(11)]
    assert stars == [0, 1, 1, 2, 2, 3, 3, 4, 4, 5, 5]

"""In-memory repositories with failure injection for the service tests."""
from __future__ import annotations

from typing import Callable, Dict, List, Optional, Set, Tuple

from sqlalchemy.exc import SQLAlchemyError

from clusterdeck.models.external_link import ExternalLink, ExternalLinkCluster, MonitoringTool
from clusterdeck.models.self_registration_role import SelfRegistrationRole


class FakeLinkRepository:
    def __init__(self) -> None:
        self.rows: Dict[int, ExternalLink] = {}
        self.save_calls = 0
        self.fail_save_on: Set[int] = set()  # 1-based save call numbers
        self.fail_update = False
        self._next_id = 1

    def add(self, name: str, active: bool = True, tool_id: int = 1) -> ExternalLink:
        link = ExternalLink(id=self._next_id, name=name, url=f"https://{name}.example.com", active=active,
                            monitoring_tool_id=tool_id)
        self._next_id += 1
        self.rows[link.id] = link
        return link

    async def save(self, link: ExternalLink) -> ExternalLink:
        self.save_calls += 1
        if self.save_calls in self.fail_save_on:
            raise SQLAlchemyError("link insert failed")
        link.id = self._next_id
        self._next_id += 1
        self.rows[link.id] = link
        return link

    async def update(self, link: ExternalLink) -> ExternalLink:
        if self.fail_update:
            raise SQLAlchemyError("link update failed")
        self.rows[link.id] = link
        return link

    async def find_one(self, link_id: int) -> Optional[ExternalLink]:
        return self.rows.get(link_id)

    async def find_all_non_mapped(self, excluded_ids) -> List[ExternalLink]:
        excluded = set(excluded_ids)
        return [link for link in self.rows.values() if link.active and link.id not in excluded]


class FakeLinkClusterRepository:
    def __init__(self, links: FakeLinkRepository) -> None:
        self.links = links
        self.rows: Dict[Tuple[int, int], ExternalLinkCluster] = {}
        self.save_calls = 0
        self.update_calls: List[Tuple[int, int, bool]] = []
        self.fail_save_on: Set[int] = set()
        self.fail_update_when: Callable[[ExternalLinkCluster], bool] = lambda mapping: False
        self.fail_find_all_clusters = False

    def add(self, link: ExternalLink, cluster_id: int, active: bool = True) -> ExternalLinkCluster:
        mapping = ExternalLinkCluster(external_link_id=link.id, cluster_id=cluster_id, active=active)
        mapping.link = link
        self.rows[(link.id, cluster_id)] = mapping
        return mapping

    async def save(self, mapping: ExternalLinkCluster) -> ExternalLinkCluster:
        self.save_calls += 1
        if self.save_calls in self.fail_save_on:
            raise SQLAlchemyError("mapping insert failed")
        key = (mapping.external_link_id, mapping.cluster_id)
        if key in self.rows:
            raise SQLAlchemyError("duplicate mapping")
        mapping.link = self.links.rows[mapping.external_link_id]
        self.rows[key] = mapping
        return mapping

    async def update(self, mapping: ExternalLinkCluster) -> int:
        self.update_calls.append((mapping.external_link_id, mapping.cluster_id, mapping.active))
        if self.fail_update_when(mapping):
            raise SQLAlchemyError("mapping update failed")
        row = self.rows.get((mapping.external_link_id, mapping.cluster_id))
        if row is None:
            return 0
        row.active = mapping.active
        row.updated_on = mapping.updated_on
        row.updated_by = mapping.updated_by
        return 1

    async def find_all_active(self) -> List[ExternalLinkCluster]:
        return [m for m in self.rows.values() if m.active and m.link.active]

    async def find_all_active_by_cluster(self, cluster_id: int) -> List[ExternalLinkCluster]:
        return [m for m in await self.find_all_active() if m.cluster_id == cluster_id]

    async def find_all_clusters(self, link_id: int) -> List[int]:
        if self.fail_find_all_clusters:
            raise SQLAlchemyError("mapping lookup failed")
        return sorted(cluster_id for (lid, cluster_id) in self.rows if lid == link_id)

    def active_clusters(self, link_id: int) -> Set[int]:
        return {cluster_id for (lid, cluster_id), m in self.rows.items() if lid == link_id and m.active}


class FakeMonitoringToolRepository:
    def __init__(self, tools: Optional[List[MonitoringTool]] = None) -> None:
        self.tools = tools or []
        self.fail = False

    async def find_all_active(self) -> List[MonitoringTool]:
        if self.fail:
            raise SQLAlchemyError("tool lookup failed")
        return [tool for tool in self.tools if tool.active]


class FakeRoleRepository:
    def __init__(self, roles: Optional[List[str]] = None) -> None:
        self.entries = [SelfRegistrationRole(role=role) for role in (roles or [])]
        self.fail = False

    async def get_all(self) -> List[SelfRegistrationRole]:
        if self.fail:
            raise SQLAlchemyError("role lookup failed")
        return list(self.entries)


class FakeUserService:
    def __init__(self) -> None:
        self.created = []
        self.error: Optional[Exception] = None

    async def create_user(self, user_info):
        self.created.append(user_info)
        if self.error is not None:
            raise self.error
        return user_info

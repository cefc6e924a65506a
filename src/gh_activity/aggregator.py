"""저장소 → 객체 ID → TrackedObject 2단계 인덱스."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from gh_activity.models import ActivityRecord, TrackedObject
from gh_activity.parser import ParsedEvent


class ActivityIndex:
    """파싱된 이벤트를 저장소/객체 단위로 묶는다.

    - (repo_name, object_id)당 TrackedObject는 최대 1개
    - 처음 본 이벤트 템플릿의 사본이 저장되어 kind/link/title이 고정된다
    - 활동은 적용 순서대로 append (중복 제거 없음)
    """

    def __init__(self) -> None:
        self._repos: dict[str, dict[str, TrackedObject]] = {}

    def apply(
        self,
        repo_name: str,
        object_id: str,
        object_template: TrackedObject,
        activity: ActivityRecord,
    ) -> TrackedObject:
        """객체를 조회하거나 템플릿으로 생성한 뒤 활동을 추가한다."""
        objects = self._repos.setdefault(repo_name, {})
        obj = objects.get(object_id)
        if obj is None:
            # 호출자의 템플릿과 분리된 사본, 활동 목록은 비운다
            obj = object_template.model_copy(update={"activities": []}, deep=True)
            objects[object_id] = obj
        obj.activities.append(activity)
        return obj

    def add(self, event: ParsedEvent) -> TrackedObject:
        """ParsedEvent 하나를 적용한다."""
        return self.apply(event.repo_name, event.object_id, event.tracked_object, event.activity)

    def get(self, repo_name: str, object_id: str) -> TrackedObject | None:
        return self._repos.get(repo_name, {}).get(object_id)

    def repositories(self) -> list[str]:
        return list(self._repos)

    def objects(self, repo_name: str) -> list[TrackedObject]:
        return list(self._repos.get(repo_name, {}).values())

    def items(self) -> Iterator[tuple[str, list[TrackedObject]]]:
        for repo_name, objects in self._repos.items():
            yield repo_name, list(objects.values())

    def activity_count(self) -> int:
        return sum(len(obj.activities) for objects in self._repos.values() for obj in objects.values())

    def is_empty(self) -> bool:
        return not self._repos

    def to_dict(self) -> dict[str, list[dict[str, Any]]]:
        """JSON 직렬화용 dict (활동은 created_at 오름차순)."""
        result: dict[str, list[dict[str, Any]]] = {}
        for repo_name, objects in self.items():
            result[repo_name] = [
                {
                    **obj.model_dump(mode="json", exclude={"activities"}),
                    "activities": [a.model_dump(mode="json") for a in obj.sorted_activities()],
                }
                for obj in objects
            ]
        return result

    def __len__(self) -> int:
        return sum(len(objects) for objects in self._repos.values())

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, tuple) or len(key) != 2:
            return False
        repo_name, object_id = key
        return self.get(repo_name, object_id) is not None

"""Async client for the planner API.

Each entity gets a resource object that caches the last list it fetched.
A successful create/update/delete drops the cache so the next read
refetches, and every mutation reports a :class:`Notification`. Derived
views (tasks by status, goals by timeframe) filter the cached list and
never cost an extra request.

Usage::

    async with PlannerClient("http://localhost:8000") as client:
        await client.login("ada", "secret1")
        await client.tasks.create({"title": "Write spec", "priority": "high"})
        todo = await client.tasks.by_status("todo")
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import httpx

logger = logging.getLogger(__name__)


@dataclass
class Notification:
    title: str
    description: str
    variant: str = "default"  # "default" or "destructive"


class ApiError(Exception):
    def __init__(self, status_code: int, message: str, field: Optional[str] = None):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
        self.field = field


def log_notification(notification: Notification) -> None:
    level = logging.WARNING if notification.variant == "destructive" else logging.INFO
    logger.log(level, "%s: %s", notification.title, notification.description)


def _error_from(response: httpx.Response) -> ApiError:
    try:
        body = response.json()
    except ValueError:
        return ApiError(response.status_code, response.text or response.reason_phrase)
    if isinstance(body, dict):
        return ApiError(
            response.status_code,
            str(body.get("detail") or body.get("error") or response.reason_phrase),
            body.get("field"),
        )
    return ApiError(response.status_code, response.reason_phrase)


def _iso(value: Union[date, datetime, str]) -> str:
    return value if isinstance(value, str) else value.isoformat()


class Resource:
    """Cached list plus create/update/delete for one entity."""

    label = "record"
    list_path = ""
    item_path = ""
    # client attributes whose cached data the server also rewrites on a mutation here
    dependents: Tuple[str, ...] = ()

    def __init__(self, client: "PlannerClient"):
        self.client = client
        self._cache: Optional[List[dict]] = None

    def invalidate(self) -> None:
        self._cache = None

    async def list(self) -> List[dict]:
        if self._cache is None:
            response = await self.client.request("GET", self.list_path)
            self._cache = response.json()
        return self._cache

    async def get(self, record_id: int) -> dict:
        response = await self.client.request("GET", f"{self.item_path}/{record_id}")
        return response.json()

    async def create(self, data: Dict[str, Any]) -> dict:
        return await self._mutate("POST", self.item_path, "create", "created", json=data)

    async def update(self, record_id: int, data: Dict[str, Any]) -> dict:
        return await self._mutate("PATCH", f"{self.item_path}/{record_id}", "update", "updated", json=data)

    async def delete(self, record_id: int) -> None:
        await self._mutate("DELETE", f"{self.item_path}/{record_id}", "delete", "deleted")

    async def _mutate(self, method: str, path: str, verb: str, past: str, **kwargs) -> Optional[dict]:
        try:
            response = await self.client.request(method, path, **kwargs)
        except ApiError as exc:
            self.client.notify(Notification(f"Failed to {verb} {self.label}", exc.message, "destructive"))
            raise
        self.invalidate()
        for name in self.dependents:
            getattr(self.client, name).invalidate()
        self.client.notify(Notification(
            f"{self.label.capitalize()} {past}",
            f"Your {self.label} has been {past} successfully.",
        ))
        return response.json() if response.content else None


class TaskResource(Resource):
    label = "task"
    list_path = item_path = "/api/tasks"
    # goal progress follows its tasks; deleting a task unlinks its time blocks
    dependents = ("goals", "time_blocks")

    async def by_status(self, status: str) -> List[dict]:
        return [task for task in await self.list() if task["status"] == status]

    async def todo(self) -> List[dict]:
        return await self.by_status("todo")

    async def in_progress(self) -> List[dict]:
        return await self.by_status("in-progress")

    async def done(self) -> List[dict]:
        return await self.by_status("done")

    async def update_status(self, task_id: int, status: str) -> dict:
        """Move a task to another kanban column."""
        return await self.update(task_id, {"status": status})


class GoalResource(Resource):
    label = "goal"
    list_path = item_path = "/api/goals"
    # deleting a goal unlinks its tasks
    dependents = ("tasks",)

    async def by_timeframe(self, timeframe: str) -> List[dict]:
        return [goal for goal in await self.list() if goal["timeframe"] == timeframe]

    async def children(self, goal_id: int) -> List[dict]:
        return [goal for goal in await self.list() if goal["parentGoalId"] == goal_id]


class TimeBlockResource(Resource):
    """Time blocks are cached per requested range."""

    label = "time block"
    list_path = item_path = "/api/timeblocks"

    def __init__(self, client: "PlannerClient"):
        super().__init__(client)
        self._ranges: Dict[Tuple[str, str], List[dict]] = {}

    def invalidate(self) -> None:
        self._ranges.clear()

    async def list(self) -> List[dict]:
        raise TypeError("time blocks are listed per range; use in_range(start, end)")

    async def in_range(self, start: Union[datetime, str], end: Union[datetime, str]) -> List[dict]:
        key = (_iso(start), _iso(end))
        if key not in self._ranges:
            response = await self.client.request(
                "GET", self.list_path, params={"startDate": key[0], "endDate": key[1]}
            )
            self._ranges[key] = response.json()
        return self._ranges[key]


class DailyPlanResource(Resource):
    label = "daily plan"
    item_path = "/api/dailyplan"

    def __init__(self, client: "PlannerClient"):
        super().__init__(client)
        self._days: Dict[str, Optional[dict]] = {}

    def invalidate(self) -> None:
        self._days.clear()

    async def list(self) -> List[dict]:
        raise TypeError("daily plans are looked up by date; use for_date(day)")

    async def for_date(self, day: Union[date, datetime, str]) -> Optional[dict]:
        """The plan for ``day``, or None when that day has no plan yet."""
        key = _iso(day)
        if key not in self._days:
            try:
                response = await self.client.request("GET", f"{self.item_path}/{key}")
                self._days[key] = response.json()
            except ApiError as exc:
                if exc.status_code != 404:
                    raise
                self._days[key] = None
        return self._days[key]


class WeeklyPlanResource(Resource):
    label = "weekly plan"
    list_path = "/api/weeklyplans"
    item_path = "/api/weeklyplan"

    async def for_date(self, day: Union[date, datetime, str]) -> Optional[dict]:
        for plan in await self.list():
            if plan["startDate"] <= _iso(day)[:10] <= plan["endDate"]:
                return plan
        return None


class IntegrationResource(Resource):
    label = "integration"
    item_path = "/api/integrations"

    async def list(self) -> List[dict]:
        raise TypeError("integrations are looked up by type; use by_type(type)")

    async def by_type(self, integration_type: str) -> Optional[dict]:
        try:
            response = await self.client.request("GET", f"{self.item_path}/{integration_type}")
        except ApiError as exc:
            if exc.status_code == 404:
                return None
            raise
        return response.json()


class PlannerClient:
    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        notify: Optional[Callable[[Notification], None]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 30,
    ):
        self.http = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)
        self.notify = notify or log_notification
        self.user: Optional[dict] = None

        self.tasks = TaskResource(self)
        self.goals = GoalResource(self)
        self.time_blocks = TimeBlockResource(self)
        self.daily_plans = DailyPlanResource(self)
        self.weekly_plans = WeeklyPlanResource(self)
        self.integrations = IntegrationResource(self)

    async def __aenter__(self) -> "PlannerClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.http.aclose()

    async def request(self, method: str, path: str, **kwargs) -> httpx.Response:
        """Send a request; any 4xx/5xx becomes an :class:`ApiError`. Never retries."""
        response = await self.http.request(method, path, **kwargs)
        if response.is_error:
            raise _error_from(response)
        return response

    def invalidate_all(self) -> None:
        for resource in (self.tasks, self.goals, self.time_blocks,
                         self.daily_plans, self.weekly_plans, self.integrations):
            resource.invalidate()

    # ---- auth ----

    async def register(self, username: str, email: str, password: str, **profile: Any) -> dict:
        payload = {"username": username, "email": email, "password": password, **profile}
        return await self._authenticate("/api/register", payload, "Registration failed")

    async def login(self, username: str, password: str) -> dict:
        payload = {"username": username, "password": password}
        return await self._authenticate("/api/login", payload, "Login failed")

    async def logout(self) -> None:
        await self.request("POST", "/api/logout")
        self.user = None
        self.invalidate_all()

    async def logout_all(self) -> None:
        """End every session of the current user, on all devices."""
        await self.request("POST", "/api/logout/all")
        self.user = None
        self.invalidate_all()

    async def me(self) -> Optional[dict]:
        """The logged-in user, or None without a valid session."""
        try:
            response = await self.request("GET", "/api/user")
        except ApiError as exc:
            if exc.status_code == 401:
                return None
            raise
        self.user = response.json()
        return self.user

    async def _authenticate(self, path: str, payload: dict, failure: str) -> dict:
        try:
            response = await self.request("POST", path, json=payload)
        except ApiError as exc:
            self.notify(Notification(failure, exc.message, "destructive"))
            raise
        self.user = response.json()
        self.invalidate_all()
        return self.user

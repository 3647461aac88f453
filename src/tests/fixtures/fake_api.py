"""In-process fake of the remote task API, built with FastAPI.

Served to the real client through ``httpx.ASGITransport`` so requests,
headers and status codes go through the genuine HTTP stack.
"""

from dataclasses import dataclass, field
from typing import Any

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse

BASE_URL = "http://testserver/api"


@dataclass
class RecordedRequest:
    """One request as seen by the fake server."""

    method: str
    path: str
    authorization: str | None
    body: Any = None


@dataclass
class FakeTaskApi:
    """Stateful fake task API.

    Knobs:
        create_status: Status code returned by POST /tasks on success
        fail_list: Make GET /tasks answer 500
        fail_mutations: Make PUT/DELETE /tasks/:id answer 500
    """

    users: dict[str, dict[str, str]] = field(default_factory=dict)
    tokens: dict[str, str] = field(default_factory=dict)
    tasks: dict[str, dict[str, Any]] = field(default_factory=dict)
    requests: list[RecordedRequest] = field(default_factory=list)
    create_status: int = 201
    fail_list: bool = False
    fail_mutations: bool = False
    _next_id: int = 1

    def __post_init__(self) -> None:
        self.app = create_app(self)

    # -- seeding -----------------------------------------------------------

    def add_user(self, name: str, email: str, password: str, token: str | None = None) -> str:
        user_id = f"user-{len(self.users) + 1}"
        self.users[email] = {"_id": user_id, "name": name, "email": email, "password": password}
        if token:
            self.tokens[token] = user_id
        return user_id

    def add_task(self, **fields: Any) -> dict[str, Any]:
        task_id = fields.pop("_id", None) or str(self._next_id)
        self._next_id += 1
        task = {
            "_id": task_id,
            "title": "Task",
            "description": "",
            "dueDate": "2025-01-31T00:00:00.000Z",
            "priority": "low",
            "status": "pending",
            "assignedTo": "",
            "createdBy": "user-1",
        }
        task.update(fields)
        self.tasks[task_id] = task
        return task

    # -- inspection --------------------------------------------------------

    def calls(self, method: str, path: str) -> list[RecordedRequest]:
        return [r for r in self.requests if r.method == method and r.path == path]

    # -- helpers used by the routes -----------------------------------------

    def user_for(self, request: Request) -> str | None:
        header = request.headers.get("authorization", "")
        if not header.startswith("Bearer "):
            return None
        return self.tokens.get(header[len("Bearer "):])

    async def record(self, request: Request) -> Any:
        raw = await request.body()
        body = await request.json() if raw else None
        self.requests.append(
            RecordedRequest(
                method=request.method,
                path=request.url.path.removeprefix("/api"),
                authorization=request.headers.get("authorization"),
                body=body,
            )
        )
        return body


def _unauthorized() -> JSONResponse:
    return JSONResponse({"msg": "No token, authorization denied"}, status_code=401)


def create_app(api: FakeTaskApi) -> FastAPI:
    """Build the FastAPI app backing a FakeTaskApi."""
    app = FastAPI(title="Fake Task API", docs_url=None, redoc_url=None)
    router = APIRouter(prefix="/api")

    @router.post("/auth/register")
    async def register(request: Request) -> JSONResponse:
        body = await api.record(request)
        if body["email"] in api.users:
            return JSONResponse({"msg": "User already exists"}, status_code=400)
        api.add_user(body["name"], body["email"], body["password"])
        return JSONResponse({"msg": "User registered"}, status_code=201)

    @router.post("/auth/login")
    async def login(request: Request) -> JSONResponse:
        body = await api.record(request)
        user = api.users.get(body["email"])
        if user is None or user["password"] != body["password"]:
            return JSONResponse({"msg": "Invalid credentials"}, status_code=400)
        token = f"token-{user['_id']}"
        api.tokens[token] = user["_id"]
        return JSONResponse({"token": token})

    @router.get("/tasks")
    async def list_tasks(request: Request) -> JSONResponse:
        await api.record(request)
        if api.user_for(request) is None:
            return _unauthorized()
        if api.fail_list:
            return JSONResponse({"msg": "Server error"}, status_code=500)
        return JSONResponse(list(api.tasks.values()))

    @router.post("/tasks")
    async def create_task(request: Request) -> JSONResponse:
        body = await api.record(request)
        user_id = api.user_for(request)
        if user_id is None:
            return _unauthorized()
        due = body.get("dueDate") or ""
        task = api.add_task(
            title=body["title"],
            description=body.get("description", ""),
            dueDate=f"{due}T00:00:00.000Z" if due else "",
            priority=body.get("priority", "low"),
            assignedTo=body["assignedTo"],
            createdBy=user_id,
        )
        return JSONResponse(task, status_code=api.create_status)

    @router.put("/tasks/{task_id}")
    async def update_task(task_id: str, request: Request) -> JSONResponse:
        body = await api.record(request)
        if api.user_for(request) is None:
            return _unauthorized()
        if api.fail_mutations:
            return JSONResponse({"msg": "Server error"}, status_code=500)
        if task_id not in api.tasks:
            return JSONResponse({"msg": "Task not found"}, status_code=404)
        task = api.tasks[task_id]
        task.update(body)
        if task.get("dueDate") and "T" not in task["dueDate"]:
            task["dueDate"] = f"{task['dueDate']}T00:00:00.000Z"
        return JSONResponse(task)

    @router.delete("/tasks/{task_id}")
    async def delete_task(task_id: str, request: Request) -> JSONResponse:
        await api.record(request)
        if api.user_for(request) is None:
            return _unauthorized()
        if api.fail_mutations:
            return JSONResponse({"msg": "Server error"}, status_code=500)
        if api.tasks.pop(task_id, None) is None:
            return JSONResponse({"msg": "Task not found"}, status_code=404)
        return JSONResponse({"msg": "Task deleted"})

    app.include_router(router)
    return app

"""Development task store for taskboard.

A small FastAPI app implementing the task store API the client talks to,
with in-memory storage. Statuses are stored and returned as display labels;
errors are returned as ``{"error": "<message>"}``.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from taskboard.engine.categories import set_authoritative
from taskboard.models.task import DEFAULT_STATUS_LABEL, code_to_label

# Initialize FastAPI app
app = FastAPI(
    title="taskboard task store",
    description="In-memory task store for local development of the taskboard client",
    version="0.1.0",
)

# In-memory storage
tasks_store: Dict[str, Dict[str, Any]] = {}


class TaskIn(BaseModel):
    """Body for POST /tasks."""
    title: str = ""
    category: str = ""
    due_date: str = ""
    status: str = DEFAULT_STATUS_LABEL
    description: str = ""


class TaskUpdate(BaseModel):
    """Body for PUT /tasks/{id}; omitted fields keep their value."""
    title: Optional[str] = None
    category: Optional[str] = None
    due_date: Optional[str] = None
    status: Optional[str] = None
    description: Optional[str] = None


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def reset_store() -> None:
    """Remove all tasks."""
    tasks_store.clear()


def _get_or_404(task_id: str) -> Dict[str, Any]:
    task = tasks_store.get(task_id)
    if task is None:
        raise HTTPException(status_code=404, detail=f"Task {task_id} not found")
    return task


@app.exception_handler(HTTPException)
async def http_error_handler(request: Request, exc: HTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=422, content={"error": "Invalid request body"})


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": "0.1.0"}


@app.get("/categories")
async def list_categories() -> List[str]:
    """Categories currently in use, sorted."""
    return list(set_authoritative(task["category"] for task in tasks_store.values()))


@app.get("/tasks")
async def list_tasks(category: Optional[str] = None) -> List[Dict[str, Any]]:
    """All tasks, newest first, optionally restricted to one category."""
    tasks = sorted(tasks_store.values(), key=lambda t: t["created_at"], reverse=True)
    if category:
        tasks = [t for t in tasks if t["category"] == category]
    return tasks


@app.get("/tasks/{task_id}")
async def get_task(task_id: str) -> Dict[str, Any]:
    return _get_or_404(task_id)


@app.post("/tasks", status_code=201)
async def create_task(body: TaskIn) -> Dict[str, Any]:
    """Create a task. Title and category are required."""
    if not body.title.strip():
        raise HTTPException(status_code=400, detail="Title is required.")
    if not body.category.strip():
        raise HTTPException(status_code=400, detail="Category is required.")

    now = _now()
    task = {
        "id": str(uuid.uuid4()),
        "title": body.title.strip(),
        "category": body.category.strip(),
        "due_date": body.due_date,
        "status": code_to_label(body.status),
        "description": body.description,
        "created_at": now,
        "updated_at": now,
    }
    tasks_store[task["id"]] = task
    return task


@app.put("/tasks/{task_id}")
async def update_task(task_id: str, body: TaskUpdate) -> Dict[str, Any]:
    """Update the provided fields of a task."""
    task = _get_or_404(task_id)
    changes = body.model_dump(exclude_none=True)
    if "title" in changes and not changes["title"].strip():
        raise HTTPException(status_code=400, detail="Title is required.")
    if "category" in changes and not changes["category"].strip():
        raise HTTPException(status_code=400, detail="Category is required.")
    if "status" in changes:
        changes["status"] = code_to_label(changes["status"])

    task.update(changes)
    task["updated_at"] = _now()
    return task


@app.delete("/tasks/{task_id}")
async def delete_task(task_id: str) -> Dict[str, Any]:
    task = _get_or_404(task_id)
    del tasks_store[task_id]
    return {"deleted": task["id"]}

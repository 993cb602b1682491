from flask import current_app

from .errors import NotFound
from .models import Task, db


def task_query(board_id, filters):
    """Build the SELECT for a board's tasks under ``filters``.

    Incomplete tasks come first, newest first within each group. Pagination
    only applies when both ``page`` and ``size`` are given.
    """
    stmt = db.select(Task).where(Task.board_id == board_id)

    if filters.completed is not None:
        stmt = stmt.where(Task.completed == filters.completed)
    if filters.q:
        stmt = stmt.where(Task.title.icontains(filters.q, autoescape=True))

    stmt = stmt.order_by(Task.completed.asc(), Task.created_at.desc(), Task.id.desc())

    if filters.paginated:
        stmt = stmt.offset((filters.page - 1) * filters.size).limit(filters.size)
    return stmt


def list_tasks(board_id, filters):
    return db.session.execute(task_query(board_id, filters)).scalars().all()


def get_task(board_id, task_id):
    task = db.session.execute(
        db.select(Task).filter_by(id=task_id, board_id=board_id)
    ).scalar_one_or_none()
    if task is None:
        raise NotFound("Task not found")
    return task


def create_task(board, creator_id, body):
    task = Task(
        board_id=board.id,
        creator_id=creator_id,
        title=body.title,
        content=body.content,
    )
    db.session.add(task)
    db.session.commit()
    return task


def update_task(board, task_id, body):
    task = get_task(board.id, task_id)
    for field, value in body.model_dump(exclude_unset=True).items():
        setattr(task, field, value)
    db.session.commit()
    return task


def delete_task(board, task_id):
    task = get_task(board.id, task_id)
    db.session.delete(task)
    db.session.commit()


def delete_tasks(board, completed):
    """Delete every task on ``board`` whose completed flag matches; return the count."""
    result = db.session.execute(
        db.delete(Task).where(Task.board_id == board.id, Task.completed == completed)
    )
    db.session.commit()
    current_app.logger.info(
        "🧹 Deleted %d %s task(s) from board %d",
        result.rowcount, "completed" if completed else "open", board.id,
    )
    return result.rowcount

"""
Reminder endpoints - clearance reminders and their live stream.

Create and delete do not return the updated list; clients watching
/reminders/stream receive it from the live subscription.
"""

import asyncio
import logging

from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect, status
from fastapi.encoders import jsonable_encoder

from app.core.errors import AppError
from app.models.base import BaseResponse, CreatedResponse
from app.models.reminder import ReminderCreate, ReminderListResponse
from app.services.identity_service import Session
from app.services.reminder_service import get_reminder_service
from app.utils.security import get_current_session, resolve_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reminders", tags=["Reminders"])


@router.get("", response_model=ReminderListResponse)
def get_reminders(session: Session = Depends(get_current_session)):
    """The caller's reminders, soonest first."""
    try:
        return ReminderListResponse(reminders=get_reminder_service().list_reminders(session.uid))
    except Exception as e:
        logger.error(f"Error fetching reminders: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load reminders",
        )


@router.post("", response_model=CreatedResponse, status_code=status.HTTP_201_CREATED)
def add_reminder(reminder: ReminderCreate, session: Session = Depends(get_current_session)):
    try:
        reminder_id = get_reminder_service().create_reminder(session, reminder)
        return CreatedResponse(id=reminder_id, message="Reminder added successfully")
    except AppError as e:
        raise e.to_http()
    except Exception as e:
        logger.error(f"Error adding reminder: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to add reminder",
        )


@router.delete("/{reminder_id}", response_model=BaseResponse)
def delete_reminder(reminder_id: str, session: Session = Depends(get_current_session)):
    try:
        get_reminder_service().delete_reminder(session, reminder_id)
        return BaseResponse(message="Reminder deleted successfully")
    except AppError as e:
        raise e.to_http()
    except Exception as e:
        logger.error(f"Error deleting reminder: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete reminder",
        )


async def _close_policy_violation(websocket: WebSocket) -> None:
    try:
        await websocket.close(code=1008)
    except Exception as exc:  # noqa: BLE001
        logger.debug("reminders websocket close failed: %s", str(exc))


@router.websocket("/stream")
async def stream_reminders(websocket: WebSocket, token: str = ""):
    """
    Stream the caller's full reminder list on every change.

    The live subscription is attached on connect and cancelled on
    disconnect. Authenticate with the ID token in the `token` query
    parameter.
    """
    await websocket.accept()
    loop = asyncio.get_running_loop()

    # Token verification and listener setup/teardown block; keep them off the loop
    try:
        session = await loop.run_in_executor(None, resolve_session, token)
    except HTTPException:
        await _close_policy_violation(websocket)
        logger.info("reminders websocket rejected (auth failed)")
        return

    queue: asyncio.Queue = asyncio.Queue()

    def on_change(reminders) -> None:
        # Called on the database listener's thread
        payload = {"reminders": jsonable_encoder(reminders)}
        loop.call_soon_threadsafe(queue.put_nowait, payload)

    async def pump() -> None:
        while True:
            payload = await queue.get()
            await websocket.send_json(payload)

    view = None
    sender = None
    try:
        view = await loop.run_in_executor(None, get_reminder_service().open_view, session.uid, on_change)
        sender = asyncio.create_task(pump())
        logger.info("reminders websocket connected uid=%s", session.uid)

        # Inbound messages are ignored; receiving only detects disconnects
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.info("reminders websocket disconnected by client")
    except Exception as exc:  # noqa: BLE001
        logger.warning("reminders websocket terminated by error: %s", str(exc))
    finally:
        if view is not None:
            await loop.run_in_executor(None, view.detach)
        if sender is not None:
            sender.cancel()
            try:
                await sender
            except asyncio.CancelledError:
                pass
            except Exception as exc:  # noqa: BLE001
                logger.warning("reminders websocket sender failed: %s", str(exc))
        logger.info("reminders websocket closed uid=%s", session.uid)

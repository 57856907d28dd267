"""Conversation router for handling conversation operations."""

from fastapi import APIRouter, Depends, HTTPException, status

from api.dependencies import get_database_manager
from api.models import (
    ConversationDetailResponse,
    ConversationListResponse,
    ConversationUpsertRequest,
    SuccessResponse,
)
from database.conversation_store.exceptions import ConversationStoreError
from database.manager import DatabaseManager
from utils.logging import logger

router = APIRouter(prefix="/conversations", tags=["conversations"])


@router.get("", response_model=ConversationListResponse)
async def list_conversations(db_manager: DatabaseManager = Depends(get_database_manager)) -> ConversationListResponse:
    """List all conversations, most recently updated first."""
    try:
        db = await db_manager.setup_conversation_manager()
        conversations = await db.list_conversations()
    except ConversationStoreError as e:
        logger.error(f"Error fetching conversations: {str(e)}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to fetch conversations")
    except Exception as e:
        logger.exception(f"Unexpected error fetching conversations: {str(e)}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to fetch conversations")

    return ConversationListResponse(conversations=conversations)


@router.post("", response_model=SuccessResponse)
async def save_conversation(
    request: ConversationUpsertRequest,
    db_manager: DatabaseManager = Depends(get_database_manager),
) -> SuccessResponse:
    """Create a conversation, or replace the title and messages of an existing one."""
    if not request.thread_id or request.messages is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing required fields")

    try:
        db = await db_manager.setup_conversation_manager()
        await db.upsert_conversation(
            thread_id=request.thread_id,
            title=request.title,
            messages=[message.to_message() for message in request.messages],
        )
    except ConversationStoreError as e:
        logger.error(f"Error saving conversation {request.thread_id}: {str(e)}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to save conversation")
    except Exception as e:
        logger.exception(f"Unexpected error saving conversation {request.thread_id}: {str(e)}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to save conversation")

    return SuccessResponse()


@router.get("/{thread_id:path}", response_model=ConversationDetailResponse)
async def get_conversation(thread_id: str, db_manager: DatabaseManager = Depends(get_database_manager)) -> ConversationDetailResponse:
    """Get a specific conversation."""
    try:
        db = await db_manager.setup_conversation_manager()
        conversation = await db.get_conversation(thread_id)
    except ConversationStoreError as e:
        logger.error(f"Error fetching conversation {thread_id}: {str(e)}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to fetch conversation")
    except Exception as e:
        logger.exception(f"Unexpected error fetching conversation {thread_id}: {str(e)}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to fetch conversation")

    if conversation is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Conversation not found")

    return ConversationDetailResponse(conversation=conversation)


@router.delete("/{thread_id:path}", response_model=SuccessResponse)
async def delete_conversation(thread_id: str, db_manager: DatabaseManager = Depends(get_database_manager)) -> SuccessResponse:
    """Delete a conversation."""
    try:
        db = await db_manager.setup_conversation_manager()
        deleted = await db.delete_conversation(thread_id)
    except ConversationStoreError as e:
        logger.error(f"Error deleting conversation {thread_id}: {str(e)}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to delete conversation")
    except Exception as e:
        logger.exception(f"Unexpected error deleting conversation {thread_id}: {str(e)}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to delete conversation")

    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Conversation not found")

    return SuccessResponse()

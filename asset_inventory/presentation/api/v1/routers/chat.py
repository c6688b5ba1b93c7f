"""Chat API router"""
from fastapi import APIRouter, Depends

from asset_inventory.application.dto.chat_dto import ChatRequestDTO, ChatResponseDTO
from asset_inventory.application.use_cases.chat_use_cases import ChatUseCases
from asset_inventory.presentation.api.v1.dependencies import get_chat_use_cases

router = APIRouter(prefix="/chat", tags=["chat"], redirect_slashes=False)


@router.post("", response_model=ChatResponseDTO)
async def chat(
    request: ChatRequestDTO,
    use_cases: ChatUseCases = Depends(get_chat_use_cases),
):
    """Answer a question about the supplied asset snapshot"""
    return await use_cases.answer(request)

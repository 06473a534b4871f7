from fastapi import APIRouter, Depends, Request, Response, status

from isucondition.deps import get_current_user
from isucondition.schemas.user import UserOut

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/signout")
async def signout(request: Request, user=Depends(get_current_user)):
    request.session.clear()
    return Response(status_code=status.HTTP_200_OK)


@router.get("/user/me", response_model=UserOut)
async def get_me(current_user=Depends(get_current_user)):
    return UserOut.model_validate(current_user)

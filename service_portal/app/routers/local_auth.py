"""
Local account routes: register, login, profile and user management.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from ..domain.local_auth import AdminGuard, LocalAuthService, LocalUserGuard, Role, public_user
from ..models import ChangeRoleRequest, LoginRequest, RegisterRequest, UpdateLocalUserRequest


def build_router(auth_service: LocalAuthService) -> APIRouter:
    current_user = LocalUserGuard(auth_service)
    admin_user = AdminGuard(current_user)

    router = APIRouter(tags=["Authentication"])

    @router.post("/auth/register", status_code=201)
    async def register(request: RegisterRequest) -> Dict[str, Any]:
        return await auth_service.register(
            request.email,
            request.password,
            request.name,
            request.role or Role.USER,
        )

    @router.post("/auth/login")
    async def login(request: LoginRequest) -> Dict[str, Any]:
        return await auth_service.login(request.email, request.password)

    @router.get("/auth/profile")
    async def get_profile(user: Dict[str, Any] = Depends(current_user)) -> Dict[str, Any]:
        return public_user(user)

    # Users management

    @router.get("/users", tags=["Users Management"], dependencies=[Depends(admin_user)])
    async def list_users() -> List[Dict[str, Any]]:
        return await auth_service.list_users()

    @router.get("/users/{user_id}", tags=["Users Management"], dependencies=[Depends(admin_user)])
    async def get_user(user_id: str) -> Dict[str, Any]:
        return await auth_service.get_user(user_id)

    @router.put("/users/{user_id}", tags=["Users Management"])
    async def update_user(
        user_id: str,
        request: UpdateLocalUserRequest,
        user: Dict[str, Any] = Depends(current_user),
    ) -> Dict[str, Any]:
        return await auth_service.update_user(user_id, request.model_dump(exclude_none=True), user)

    @router.delete("/users/{user_id}", tags=["Users Management"], dependencies=[Depends(admin_user)])
    async def delete_user(user_id: str) -> Dict[str, str]:
        await auth_service.delete_user(user_id)
        return {"message": "User deleted successfully"}

    @router.patch("/users/{user_id}/role", tags=["Users Management"], dependencies=[Depends(admin_user)])
    async def change_role(user_id: str, request: ChangeRoleRequest) -> Dict[str, Any]:
        return await auth_service.change_role(user_id, request.role)

    return router

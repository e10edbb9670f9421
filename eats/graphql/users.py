"""
User queries and mutations.
"""

import strawberry
from strawberry.types import Info

from eats.graphql.inputs import CreateAccountInput, EditProfileInput, LoginInput, input_to_dict
from eats.graphql.permissions import IsAuthenticated
from eats.graphql.types import (
    CreateAccountOutput,
    EditProfileOutput,
    LoginOutput,
    UserProfileOutput,
    UserType,
)
from eats.services.users import UserService


@strawberry.type
class UserQuery:

    @strawberry.field(permission_classes=[IsAuthenticated])
    def me(self, info: Info) -> UserType:
        return UserType.from_model(info.context.user)

    @strawberry.field(permission_classes=[IsAuthenticated])
    async def user_profile(self, info: Info, user_id: int) -> UserProfileOutput:
        result = await UserService(info.context.db).find_by_id(user_id)
        if not result.ok:
            return UserProfileOutput.failed(result)
        return UserProfileOutput(ok=True, user=UserType.from_model(result.value))


@strawberry.type
class UserMutation:

    @strawberry.mutation
    async def create_account(self, info: Info, input: CreateAccountInput) -> CreateAccountOutput:
        result = await UserService(info.context.db).create_account(input_to_dict(input))
        if not result.ok:
            return CreateAccountOutput.failed(result)
        return CreateAccountOutput(ok=True, user_id=result.value)

    @strawberry.mutation
    async def login(self, info: Info, input: LoginInput) -> LoginOutput:
        result = await UserService(info.context.db).login(input_to_dict(input))
        if not result.ok:
            return LoginOutput.failed(result)
        return LoginOutput(ok=True, token=result.value)

    @strawberry.mutation(permission_classes=[IsAuthenticated])
    async def edit_profile(self, info: Info, input: EditProfileInput) -> EditProfileOutput:
        result = await UserService(info.context.db).edit_profile(
            info.context.user, input_to_dict(input)
        )
        if not result.ok:
            return EditProfileOutput.failed(result)
        return EditProfileOutput(ok=True)

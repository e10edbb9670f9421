from eats.core.errors import ErrorKind
from eats.core.security import decode_access_token
from eats.models import User, UserRole
from eats.services.users import UserService


async def test_create_account_and_login(db):
    service = UserService(db)
    created = await service.create_account(
        {"email": "New@Eats.io", "password": "hunter22", "role": "owner"}
    )
    assert created.ok

    user = await db.get(User, created.value)
    assert user.email == "new@eats.io"
    assert user.role == UserRole.OWNER
    assert user.password_hash != "hunter22"

    login = await service.login({"email": "new@eats.io", "password": "hunter22"})
    assert login.ok
    assert decode_access_token(login.value)["id"] == user.id


async def test_create_account_rejects_duplicate_email(db, client_user):
    result = await UserService(db).create_account(
        {"email": "client@eats.io", "password": "hunter22"}
    )
    assert result.error_kind == ErrorKind.VALIDATION
    assert result.error == "There is a user with that email already"


async def test_create_account_rejects_bad_email(db):
    result = await UserService(db).create_account({"email": "not-an-email", "password": "hunter22"})
    assert result.error_kind == ErrorKind.VALIDATION


async def test_login_failures(db, client_user):
    service = UserService(db)
    wrong = await service.login({"email": "client@eats.io", "password": "nope"})
    unknown = await service.login({"email": "ghost@eats.io", "password": "nope"})
    assert wrong.error_kind == ErrorKind.FORBIDDEN
    assert unknown.error_kind == ErrorKind.NOT_FOUND


async def test_find_by_id(db, client_user):
    service = UserService(db)
    assert (await service.find_by_id(client_user.id)).value.email == "client@eats.io"
    assert (await service.find_by_id(999)).error_kind == ErrorKind.NOT_FOUND


async def test_edit_profile_changes_email_and_password(db, client_user):
    client_user.verified = True
    await db.commit()
    service = UserService(db)

    result = await service.edit_profile(
        client_user, {"email": "renamed@eats.io", "password": "brand-new"}
    )
    assert result.ok
    assert client_user.email == "renamed@eats.io"
    assert client_user.verified is False
    assert (await service.login({"email": "renamed@eats.io", "password": "brand-new"})).ok


async def test_edit_profile_rejects_taken_email(db, client_user, owner):
    result = await UserService(db).edit_profile(client_user, {"email": "owner@eats.io"})
    assert result.error_kind == ErrorKind.VALIDATION
    assert client_user.email == "client@eats.io"

import bcrypt
import pytest

from src.app.use_cases.auth import RegisterCommand, RegisterUseCase


@pytest.mark.asyncio
async def test_successful_registration(mock_uow):
    use_case = RegisterUseCase(mock_uow)

    result = await use_case.execute(
        RegisterCommand(
            email="  New.User@Example.com ",
            password="SecurePass123!",
            first_name="Grace",
            last_name="Hopper",
        )
    )

    assert result.is_ok()
    assert result.value.email == "new.user@example.com"
    assert result.value.first_name == "Grace"

    account = mock_uow.accounts.create.call_args.args[0]
    assert account.email == "new.user@example.com"
    assert account.password_hash != "SecurePass123!"
    assert bcrypt.checkpw(b"SecurePass123!", account.password_hash.encode())
    assert account.is_locked is False
    assert account.failed_attempts == 0
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_duplicate_email_is_rejected(mock_uow, account):
    mock_uow.accounts.get_by_email.return_value = account
    use_case = RegisterUseCase(mock_uow)

    result = await use_case.execute(
        RegisterCommand(
            email="USER@example.com",
            password="SecurePass123!",
            first_name="Ada",
            last_name="Lovelace",
        )
    )

    assert result.is_err()
    assert result.error.code == "EMAIL_ALREADY_EXISTS"
    mock_uow.accounts.get_by_email.assert_awaited_once_with("user@example.com")
    mock_uow.accounts.create.assert_not_called()
    mock_uow.commit.assert_not_called()

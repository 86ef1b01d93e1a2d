"""
Tests for the create_admin.py script.
"""
import create_admin
from app.core.config import settings
from app.crud.account import get_account_by_email
from app.models.account import AccountRole


async def test_creates_admin_account(session_factory, tmp_path, monkeypatch, capsys):
    monkeypatch.setattr(settings, "DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'savings.db'}")
    answers = iter(["root@example.com", "rootpass", "", "", ""])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))

    await create_admin.create_admin()

    async with session_factory() as session:
        admin = await get_account_by_email("root@example.com", session)
    assert admin is not None
    assert admin.role == AccountRole.ADMIN
    assert admin.first_name == "System"
    assert "Admin account created" in capsys.readouterr().out


async def test_reports_duplicate_email(session_factory, tmp_path, monkeypatch, capsys, account):
    monkeypatch.setattr(settings, "DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'savings.db'}")
    answers = iter(["ada@example.com", "rootpass", "", "", ""])
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))

    await create_admin.create_admin()

    assert "already exists" in capsys.readouterr().out

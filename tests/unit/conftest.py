from collections.abc import Callable
from unittest.mock import AsyncMock, MagicMock

import pytest


def _wire_connection(mock_get_conn: MagicMock) -> tuple[MagicMock, MagicMock]:
    """Wire up an async mock connection + cursor and return (mock_conn, mock_cursor)."""
    mock_cursor = MagicMock()
    mock_cursor.execute = AsyncMock()
    mock_cursor.fetchone = AsyncMock(return_value=None)
    mock_cursor.fetchall = AsyncMock(return_value=[])
    mock_cursor.rowcount = 1
    mock_conn = MagicMock()
    mock_conn.cursor.return_value.__aenter__ = AsyncMock(return_value=mock_cursor)
    mock_conn.cursor.return_value.__aexit__ = AsyncMock(return_value=False)
    mock_conn.execute = AsyncMock()
    mock_conn.commit = AsyncMock()
    mock_get_conn.return_value.__aenter__ = AsyncMock(return_value=mock_conn)
    mock_get_conn.return_value.__aexit__ = AsyncMock(return_value=False)
    return mock_conn, mock_cursor


@pytest.fixture()
def mock_db(monkeypatch: pytest.MonkeyPatch) -> Callable[[str], tuple[MagicMock, MagicMock]]:
    """Patch ``get_connection`` in the given module and return (conn, cursor)."""

    def wire(module: str) -> tuple[MagicMock, MagicMock]:
        mock_get_conn = MagicMock()
        monkeypatch.setattr(f"{module}.get_connection", mock_get_conn)
        return _wire_connection(mock_get_conn)

    return wire

"""
Unit tests for the table bootstrap script
"""

from unittest.mock import MagicMock

import pytest

from providers.opensource.clickhouse import INDICATORS_TABLE
from providers.opensource.postgres import STATUS_TABLE
from scripts.init_indicator_tables import create_clickhouse_tables, create_postgres_tables


@pytest.mark.unit
class TestInitTables:
    def test_indicator_table_is_plain_merge_tree(self):
        client = MagicMock()

        create_clickhouse_tables(client)

        statements = [call.args[0] for call in client.execute.call_args_list]
        indicator_ddl = next(s for s in statements if f"TABLE IF NOT EXISTS {INDICATORS_TABLE}" in s)
        assert "ENGINE = MergeTree" in indicator_ddl
        assert "Replacing" not in indicator_ddl

    def test_postgres_status_table(self):
        conn = MagicMock()
        cur = conn.cursor.return_value.__enter__.return_value

        create_postgres_tables(conn)

        statements = [call.args[0] for call in cur.execute.call_args_list]
        assert any(f"TABLE IF NOT EXISTS {STATUS_TABLE}" in s for s in statements)

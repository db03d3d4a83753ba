"""Tests for database and connection nodes, and the context lifecycle."""

import pytest

from namerec.dbtree import ConnectionNode
from namerec.dbtree import DatabaseNode
from namerec.dbtree import DBTreeQueryError
from namerec.dbtree import InfoNode
from namerec.dbtree import ModelType
from namerec.dbtree import TableNode


@pytest.mark.asyncio
async def test_database_children_are_tables(context, shop_node, runner) -> None:
    children = await shop_node.get_children(context)

    assert children == (TableNode(shop_node.descriptor, 'customers'), TableNode(shop_node.descriptor, 'orders'))
    _, _, params = runner.calls[0]
    assert params == {'schema': 'shop'}

    await shop_node.get_children(context)
    assert runner.count('information_schema.TABLES') == 1


@pytest.mark.asyncio
async def test_connection_children_are_databases(context, server, runner) -> None:
    node = ConnectionNode(server)

    children = await node.get_children(context)

    assert [child.label for child in children] == ['shop', 'crm']
    assert all(isinstance(child, DatabaseNode) for child in children)
    assert children[0].identity == 'db1|3306|root|shop'
    handle, _, _ = runner.calls[0]
    assert handle.descriptor.database is None


@pytest.mark.asyncio
async def test_connection_node_tree_item(context, server) -> None:
    item = ConnectionNode(server).tree_item(context)
    assert item.node_type is ModelType.CONNECTION
    assert item.label == 'db1@3306'
    assert item.identity == 'db1|3306|root'
    assert item.expanded is False


@pytest.mark.asyncio
async def test_database_discovery_failure(context, shop_node, runner) -> None:
    runner.respond('information_schema.TABLES', DBTreeQueryError("Unknown database 'shop'"))

    children = await shop_node.get_children(context)

    assert children == (InfoNode("Unknown database 'shop'"),)
    assert not context.cache.has(shop_node.identity)


@pytest.mark.asyncio
async def test_column_leaf(context, orders) -> None:
    children = await orders.get_children(context)
    id_column = children[0]

    assert await id_column.get_children(context) == ()
    item = id_column.tree_item(context)
    assert item.label == 'id : int(11)'
    assert item.expanded is None
    assert 'PK' in item.description
    assert 'NOT NULL' in item.description
    assert id_column.identity.startswith(orders.identity + '|')


@pytest.mark.asyncio
async def test_context_reset(context, orders, connector) -> None:
    await orders.get_children(context)
    context.cache.set_expansion_state(orders.identity, True)

    await context.reset()

    assert context.cache.stats()['size'] == 0
    assert context.cache.get_expansion_state(orders.identity) is False
    assert len(context.registry) == 0
    assert connector.opened[0].disposed is True

"""構文木走査のテスト。"""

import esprima

from two_var.analyzer.traversal import (
    TreeWalker,
    iter_child_nodes,
    node_get,
    node_position,
    walk,
)


def program(*body):
    return {"type": "Program", "body": list(body), "sourceType": "script"}


def block(*body):
    return {"type": "BlockStatement", "body": list(body)}


def var(*names):
    return {
        "type": "VariableDeclaration",
        "kind": "var",
        "declarations": [
            {"type": "VariableDeclarator", "id": {"type": "Identifier", "name": n}, "init": None}
            for n in names
        ],
    }


class TestNodeAccess:
    """ノードアクセスのテスト。"""

    def test_node_get_dict(self):
        assert node_get({"type": "Identifier", "name": "a"}, "name") == "a"
        assert node_get({"type": "Identifier"}, "name", "x") == "x"
        assert node_get(None, "name") is None

    def test_node_get_esprima(self):
        tree = esprima.parseScript("var a;")
        declaration = node_get(tree, "body")[0]
        assert node_get(declaration, "kind") == "var"
        assert node_get(node_get(declaration, "declarations")[0], "init") is None

    def test_node_position(self):
        tree = esprima.parseScript("\n  var a;", {"loc": True})
        assert node_position(node_get(tree, "body")[0]) == (2, 2)

    def test_node_position_without_loc(self):
        assert node_position(var("a")) == (0, None)

    def test_iter_child_nodes_skips_non_nodes(self):
        tree = program(var("a"), block())
        children = list(iter_child_nodes(tree))
        assert [c["type"] for c in children] == ["VariableDeclaration", "BlockStatement"]


class TestTreeWalker:
    """TreeWalkerのテスト。"""

    def test_enter_exit_order(self):
        events = []
        handlers = {
            "Program": lambda n, p: events.append("enter Program"),
            "Program:exit": lambda n, p: events.append("exit Program"),
            "BlockStatement": lambda n, p: events.append("enter Block"),
            "BlockStatement:exit": lambda n, p: events.append("exit Block"),
            "VariableDeclaration": lambda n, p: events.append("var " + n["declarations"][0]["id"]["name"]),
        }
        walk(program(var("a"), block(var("b")), var("c")), handlers)

        assert events == [
            "enter Program",
            "var a",
            "enter Block",
            "var b",
            "exit Block",
            "var c",
            "exit Program",
        ]

    def test_parent_is_passed(self):
        parents = []
        inner = var("b")
        outer = block(inner)
        walk(program(outer), {"VariableDeclaration": lambda n, p: parents.append(p)})
        assert parents == [outer]

    def test_visited_count(self):
        walker = TreeWalker({})
        walker.walk(program(var("a")))
        # Program, VariableDeclaration, VariableDeclarator, Identifier
        assert walker.visited == 4

    def test_walk_esprima_tree(self):
        kinds = []
        tree = esprima.parseScript("for (let i = 0; i < 1; i++) { const x = i; }")
        walk(tree, {"VariableDeclaration": lambda n, p: kinds.append((n.kind, p.type))})
        assert kinds == [("let", "ForStatement"), ("const", "BlockStatement")]

    def test_deeply_nested_expression(self):
        """再帰上限より深い構文木も走査できる。"""
        source = "var x = " + "+".join(["a"] * 3000) + ";"
        tree = esprima.parseScript(source)
        events = []
        handlers = {
            "BinaryExpression": lambda n, p: events.append("enter"),
            "BinaryExpression:exit": lambda n, p: events.append("exit"),
        }

        walker = walk(tree, handlers)

        assert events.count("enter") == 2999
        assert events[:2999] == ["enter"] * 2999
        assert events[2999:] == ["exit"] * 2999
        # Program, VariableDeclaration, VariableDeclarator, Identifier(x),
        # 2999 BinaryExpression, 3000 Identifier(a)
        assert walker.visited == 6003

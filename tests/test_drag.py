# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tests for drag interpretation, mutation policies and the drag session."""

import random

import pytest

from genro_wbstree import (
    Applied,
    DragState,
    FreeReparentPolicy,
    IntentKind,
    MutationIntent,
    Rejected,
    RejectReason,
    SiblingOnlyPolicy,
    WbsBoard,
)
from genro_wbstree.drag import get_policy

ABCDE_SHAPE = [('A', [('B', [('D', []), ('E', [])]), ('C', [])])]


class TestFreeReparentPolicy:
    """Tests for drops under the free policy."""

    def test_drop_inside(self, board):
        """Test dragging D right onto C makes it C's child."""
        outcome = board.drag_end('D', 'C', offset_x=24)
        assert isinstance(outcome, Applied)
        assert outcome.applied is True
        assert outcome.tree is board.tree
        assert outcome.intent.kind is IntentKind.MOVE_INSIDE
        assert board.tree.shape() == [('A', [('B', [('E', [])]), ('C', [('D', [])])])]

    def test_drop_inside_goes_first(self, board):
        """Test a node dropped inside lands as first child."""
        board.drag_end('E', 'B', offset_x=100)
        assert board.tree.shape() == [('A', [('B', [('E', []), ('D', [])]), ('C', [])])]

    def test_small_offset_is_sibling_drop(self, board):
        """Test an offset under one level keeps the sibling placement."""
        outcome = board.drag_end('D', 'C', offset_x=23)
        assert outcome.intent.kind is IntentKind.MOVE_AFTER
        assert board.tree.shape() == [('A', [('B', [('E', [])]), ('C', []), ('D', [])])]

    def test_pointer_in_top_half_drops_before(self, board):
        """Test the nearest-center rule with a pointer position."""
        outcome = board.drag_end('D', 'C', pointer_ratio=0.2)
        assert outcome.intent.kind is IntentKind.MOVE_BEFORE
        assert board.tree.shape() == [('A', [('B', [('E', [])]), ('D', []), ('C', [])])]

    def test_pointer_at_center_drops_after(self, board):
        """Test the exact center belongs to the bottom half."""
        board.drag_end('C', 'B', pointer_ratio=0.5)
        assert board.tree.shape() == ABCDE_SHAPE

    def test_dragging_up_drops_before(self, board):
        """Test without pointer position an upward drag lands before."""
        outcome = board.drag_end('E', 'D')
        assert outcome.intent.kind is IntentKind.MOVE_BEFORE
        assert board.tree.shape() == [('A', [('B', [('E', []), ('D', [])]), ('C', [])])]

    def test_outdent_self(self, board):
        """Test dragging a row left on itself moves it after its parent."""
        outcome = board.drag_end('E', 'E', offset_x=-24)
        assert outcome.intent.kind is IntentKind.MOVE_AFTER
        assert outcome.intent.anchor_id == 'B'
        assert board.tree.shape() == [('A', [('B', [('D', [])]), ('E', []), ('C', [])])]

    def test_outdent_over_other_row(self, board):
        """Test dragging left over E places D after E's parent."""
        board.drag_end('D', 'E', offset_x=-30)
        assert board.tree.shape() == [('A', [('B', [('E', [])]), ('D', []), ('C', [])])]

    def test_outdent_over_root_falls_back(self, board):
        """Test roots cannot be outdented, the drop stays a sibling drop."""
        board.drag_end('C', 'A', offset_x=-50)
        assert board.tree.shape() == [('C', []), ('A', [('B', [('D', []), ('E', [])])])]

    def test_cyclic_inside_rejected(self, board):
        """Test moving A under B is refused."""
        before = board.tree
        outcome = board.drag_end('A', 'B', offset_x=30)
        assert isinstance(outcome, Rejected)
        assert outcome.applied is False
        assert outcome.reason is RejectReason.CYCLIC_MOVE
        assert board.tree is before

    def test_cyclic_sibling_rejected(self, board):
        """Test dropping next to a descendant is refused."""
        assert board.drag_end('A', 'D').reason is RejectReason.CYCLIC_MOVE
        assert board.drag_end('B', 'E', offset_x=-30).reason is RejectReason.CYCLIC_MOVE

    def test_self_drop_rejected(self, board):
        """Test self drops with no depth change available."""
        assert board.drag_end('B', 'B').reason is RejectReason.SELF_MOVE
        # B is a first child, A is a root: nothing to indent under or out of
        assert board.drag_end('B', 'B', offset_x=40).reason is RejectReason.SELF_MOVE
        assert board.drag_end('A', 'A', offset_x=-40).reason is RejectReason.SELF_MOVE
        assert board.tree.shape() == ABCDE_SHAPE

    def test_indent_self(self, board):
        """Test dragging a row right on itself nests it in its previous sibling."""
        outcome = board.drag_end('E', 'E', offset_x=30)
        assert outcome.intent == MutationIntent(IntentKind.MOVE_INSIDE, 'E', 'D', 'D', 0)
        assert board.tree.shape() == [('A', [('B', [('D', [('E', [])])]), ('C', [])])]

    def test_indent_self_goes_last(self, board):
        """Test the indented row keeps its place in the row order."""
        rows_before = [row.id for row in board.visible_rows]
        board.drag_end('C', 'C', offset_x=24)
        assert board.tree.shape() == [('A', [('B', [('D', []), ('E', []), ('C', [])])])]
        assert [row.id for row in board.visible_rows] == rows_before
        assert board.code_of('C') == '1.1.3'

    def test_indent_then_outdent_self(self, board):
        """Test indent and outdent on the same row undo each other."""
        board.drag_end('E', 'E', offset_x=30)
        board.drag_end('E', 'E', offset_x=-30)
        assert board.tree.shape() == ABCDE_SHAPE

    def test_indent_self_under_leaf_only_row(self):
        """Test self indent when the previous sibling refuses children."""
        board = WbsBoard([{'id': 'A', 'canHaveChildren': False}, {'id': 'B'}])
        outcome = board.drag_end('B', 'B', offset_x=30)
        assert outcome.reason is RejectReason.AMBIGUOUS_DROP
        assert board.tree.shape() == [('A', []), ('B', [])]

    def test_non_finite_offset_rejected(self, board):
        """Test NaN and infinite offsets come back as rejections."""
        for offset in (float('nan'), float('inf'), float('-inf')):
            outcome = board.drag_end('D', 'C', offset_x=offset)
            assert outcome.reason is RejectReason.AMBIGUOUS_DROP
        assert board.tree.shape() == ABCDE_SHAPE
        assert board.session.is_dragging is False

    def test_unknown_ids_rejected(self, board):
        """Test unknown source or target."""
        assert board.drag_end('X', 'A').reason is RejectReason.NOT_FOUND
        assert board.drag_end('A', 'X').reason is RejectReason.NOT_FOUND

    def test_released_outside_rejected(self, board):
        """Test a release outside any row."""
        outcome = board.drag_end('D', None)
        assert outcome.reason is RejectReason.AMBIGUOUS_DROP
        assert board.tree.shape() == ABCDE_SHAPE

    def test_hidden_target_rejected(self, board):
        """Test rows hidden by a collapsed parent are not droppable."""
        board.toggle_collapse('B')
        assert board.drag_end('C', 'D').reason is RejectReason.AMBIGUOUS_DROP

    def test_cannot_have_children(self):
        """Test drops inside a node that refuses children."""
        board = WbsBoard([
            {'id': 'A', 'children': [{'id': 'B'}, {'id': 'C', 'canHaveChildren': False}]},
        ])
        outcome = board.drag_end('B', 'C', offset_x=30)
        assert outcome.reason is RejectReason.AMBIGUOUS_DROP
        assert 'cannot have children' in str(outcome)

    def test_drop_into_collapsed_node(self, board):
        """Test a collapsed node still accepts children, which stay hidden."""
        board.toggle_collapse('B')
        board.drag_end('C', 'B', offset_x=30)
        assert [row.id for row in board.visible_rows] == ['A', 'B']
        assert board.store.parent_of('C') == 'B'

    def test_custom_indentation_width(self, abcde):
        """Test the indentation threshold comes from the config."""
        board = WbsBoard(abcde, config={'indentation_width': 10})
        board.drag_end('D', 'C', offset_x=12)
        assert board.store.parent_of('D') == 'C'

    def test_deterministic(self, abcde):
        """Test identical inputs give identical results."""
        shapes = []
        for _ in range(2):
            board = WbsBoard(abcde)
            board.drag_end('C', 'D', offset_x=5)
            board.drag_end('E', 'A', offset_x=-3, pointer_ratio=0.7)
            shapes.append(board.tree.shape())
        assert shapes[0] == shapes[1]

    def test_random_drags_keep_invariants(self, project):
        """Test id set, count and acyclicity under random drags."""
        board = WbsBoard(project)
        ids = sorted(board.tree.ids())
        rng = random.Random(42)
        applied = 0
        for _ in range(300):
            source = rng.choice(ids)
            over = rng.choice(ids + [None])
            outcome = board.drag_end(
                source, over,
                offset_x=rng.choice([-60, -24, 0, 10, 24, 60]),
                pointer_ratio=rng.choice([None, 0.1, 0.9]),
            )
            assert sorted(board.tree.ids()) == ids
            if outcome.applied:
                applied += 1
                parent = board.store.parent_of(source)
                if parent is not None:
                    assert not board.store.is_ancestor(source, parent)
        assert applied > 50


class TestSiblingOnlyPolicy:
    """Tests for drops under the sibling-only policy."""

    def test_cross_level_rejected(self, sibling_board):
        """Test moving D next to C is refused."""
        before = sibling_board.tree
        rows = sibling_board.visible_rows
        outcome = sibling_board.drag_end('D', 'C')
        assert outcome.reason is RejectReason.DIFFERENT_LEVEL
        assert sibling_board.tree is before
        assert sibling_board.visible_rows == rows

    def test_reorder_down(self, sibling_board):
        """Test dragging D onto E swaps them."""
        outcome = sibling_board.drag_end('D', 'E')
        assert outcome.intent == MutationIntent(IntentKind.MOVE_AFTER, 'D', 'E', 'B', 1)
        assert sibling_board.tree.shape() == [('A', [('B', [('E', []), ('D', [])]), ('C', [])])]

    def test_reorder_up(self, project):
        """Test dragging a row up takes the target position."""
        board = WbsBoard(project, config={'policy': 'sibling'})
        outcome = board.drag_end('wbs-3', 'wbs-1')
        assert outcome.intent.kind is IntentKind.MOVE_BEFORE
        assert outcome.intent.index == 0
        assert [node.id for node in board.tree] == ['wbs-3', 'wbs-1', 'wbs-2']

    def test_reorder_across_middle(self, project):
        """Test the source lands at the target position, shifting the rest."""
        board = WbsBoard(project, config={'policy': 'sibling'})
        board.drag_end('wbs-2-1', 'wbs-2-3')
        assert [n.id for n in board.store.children_of('wbs-2')] == ['wbs-2-2', 'wbs-2-3', 'wbs-2-1']

    def test_offset_ignored(self, sibling_board):
        """Test horizontal offsets never reparent."""
        sibling_board.drag_end('E', 'D', offset_x=100)
        assert sibling_board.store.parent_of('E') == 'B'
        assert [n.id for n in sibling_board.store.children_of('B')] == ['E', 'D']

    def test_self_and_descendant(self, sibling_board):
        """Test self drops and drops on descendants."""
        assert sibling_board.drag_end('B', 'B').reason is RejectReason.SELF_MOVE
        assert sibling_board.drag_end('A', 'B').reason is RejectReason.DIFFERENT_LEVEL

    def test_random_drags_keep_parents(self, project):
        """Test accepted moves never change the parent."""
        board = WbsBoard(project, config={'policy': 'sibling'})
        ids = board.tree.ids()
        rng = random.Random(7)
        applied = 0
        for _ in range(300):
            source, over = rng.choice(ids), rng.choice(ids)
            parent_before = board.store.parent_of(source)
            outcome = board.drag_end(source, over, offset_x=rng.choice([-50, 0, 50]))
            assert board.store.parent_of(source) == parent_before
            if outcome.applied:
                applied += 1
            else:
                assert outcome.reason in (RejectReason.DIFFERENT_LEVEL, RejectReason.SELF_MOVE)
        assert applied > 20


class TestInterpreter:
    """Tests for DragInterpreter and policy selection."""

    def test_interpret_does_not_apply(self, board):
        """Test interpret only resolves the intent."""
        before = board.tree
        intent = board.interpreter.interpret('D', 'C', offset_x=30)
        assert intent == MutationIntent(IntentKind.MOVE_INSIDE, 'D', 'C', 'C', 0)
        assert board.tree is before

    def test_apply_intent(self, board):
        """Test applying a resolved intent."""
        intent = board.interpreter.interpret('C', 'B', pointer_ratio=0.1)
        outcome = board.interpreter.apply(intent)
        assert outcome.applied
        assert [n.id for n in board.store.children_of('A')] == ['C', 'B']

    def test_get_policy(self):
        """Test policy lookup by name or instance."""
        assert isinstance(get_policy('free'), FreeReparentPolicy)
        assert isinstance(get_policy('sibling'), SiblingOnlyPolicy)
        policy = SiblingOnlyPolicy()
        assert get_policy(policy) is policy
        with pytest.raises(ValueError, match="Unknown policy"):
            get_policy('anywhere')

    def test_switch_policy(self, board):
        """Test the policy can be switched on a live board."""
        board.policy = 'sibling'
        assert board.policy.name == 'sibling'
        assert board.drag_end('D', 'C').reason is RejectReason.DIFFERENT_LEVEL
        board.policy = FreeReparentPolicy()
        assert board.drag_end('D', 'C').applied


class TestDragSession:
    """Tests for the drag state machine."""

    def test_end_without_start(self, board):
        """Test a stray end is a harmless no-op."""
        before = board.tree
        outcome = board.end_drag()
        assert outcome.reason is RejectReason.AMBIGUOUS_DROP
        assert board.session.state is DragState.IDLE
        assert board.tree is before
        assert board.end_drag().reason is RejectReason.AMBIGUOUS_DROP

    def test_full_gesture(self, board):
        """Test start, move and end."""
        board.start_drag('D')
        assert board.session.state is DragState.DRAGGING
        board.drag_over('E', offset_x=2)
        board.drag_over('C', offset_x=30)
        outcome = board.end_drag()
        assert outcome.applied
        assert board.session.state is DragState.IDLE
        assert board.session.last_state is DragState.APPLYING
        assert board.store.parent_of('D') == 'C'

    def test_cancel(self, board):
        """Test a cancelled drag changes nothing."""
        before = board.tree
        board.start_drag('D')
        board.drag_over('C', offset_x=30)
        board.cancel_drag()
        assert board.session.state is DragState.IDLE
        assert board.session.last_state is DragState.CANCELLED
        assert board.end_drag().reason is RejectReason.AMBIGUOUS_DROP
        assert board.tree is before

    def test_move_without_start_ignored(self, board):
        """Test pointer moves outside a drag are ignored."""
        board.drag_over('C', offset_x=30)
        assert board.session.over_id is None
        assert board.session.state is DragState.IDLE

    def test_end_without_target(self, board):
        """Test a drag that never hovered a row."""
        board.start_drag('D')
        assert board.end_drag().reason is RejectReason.AMBIGUOUS_DROP
        assert board.tree.shape() == ABCDE_SHAPE

    def test_restart(self, board):
        """Test starting again drops the previous gesture."""
        board.start_drag('D')
        board.drag_over('C', offset_x=30)
        board.start_drag('E')
        assert board.session.source_id == 'E'
        assert board.session.over_id is None
        board.drag_over('C', offset_x=30)
        board.end_drag()
        assert board.store.parent_of('E') == 'C'
        assert board.store.parent_of('D') == 'B'

# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Shared fixtures for the genro-wbstree tests."""

import pytest

from genro_wbstree import TreeStore, WbsBoard, WbsItem


def _abcde():
    # A[B[D,E],C]
    return [
        {'id': 'A', 'children': [
            {'id': 'B', 'children': [{'id': 'D'}, {'id': 'E'}]},
            {'id': 'C'},
        ]},
    ]


def _project():
    return [
        {
            'id': 'wbs-1', 'name': 'Project Planning', 'status': 'completed', 'progress': 100,
            'children': [
                {
                    'id': 'wbs-1-1', 'name': 'Requirements Gathering', 'status': 'completed', 'progress': 100,
                    'children': [
                        {'id': 'wbs-1-1-1', 'name': 'Stakeholder Interviews', 'status': 'completed', 'progress': 100},
                        {'id': 'wbs-1-1-2', 'name': 'Document Requirements', 'status': 'completed', 'progress': 100},
                    ],
                },
                {'id': 'wbs-1-2', 'name': 'Technical Design', 'status': 'completed', 'progress': 100},
            ],
        },
        {
            'id': 'wbs-2', 'name': 'Development', 'status': 'in-progress', 'progress': 60,
            'children': [
                {'id': 'wbs-2-1', 'name': 'Frontend Implementation', 'status': 'completed', 'progress': 100},
                {'id': 'wbs-2-2', 'name': 'Backend Implementation', 'status': 'in-progress', 'progress': 70},
                {'id': 'wbs-2-3', 'name': 'Integration', 'status': 'not-started', 'progress': 0},
            ],
        },
        {
            'id': 'wbs-3', 'name': 'Testing & Deployment', 'status': 'not-started', 'progress': 0,
            'children': [
                {'id': 'wbs-3-1', 'name': 'QA Testing', 'status': 'not-started', 'progress': 0},
                {'id': 'wbs-3-2', 'name': 'Deployment', 'status': 'not-started', 'progress': 0},
            ],
        },
    ]


@pytest.fixture
def abcde():
    """Forest literal A[B[D,E],C]."""
    return _abcde()


@pytest.fixture
def project():
    """Forest literal of the sample project plan (12 nodes)."""
    return _project()


@pytest.fixture
def store(abcde):
    return TreeStore(abcde)


@pytest.fixture
def board(abcde):
    return WbsBoard(abcde)


@pytest.fixture
def sibling_board(abcde):
    return WbsBoard(abcde, config={'policy': 'sibling'})


@pytest.fixture
def project_board(project):
    return WbsBoard(project, payload_factory=WbsItem.from_dict)

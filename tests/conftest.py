import os

# Keep @track decorators from reaching an Opik backend during tests
os.environ.setdefault("OPIK_TRACK_DISABLE", "true")

import pytest  # noqa: E402

from domain.taxonomy.index import TaxonomyIndex  # noqa: E402

TAXONOMY_TREE = {
    "id": "R11",
    "label": "Science",
    "children": [
        {
            "id": "R132",
            "label": "Engineering",
            "children": [
                {"id": "R155", "label": "Electrical and Computer Engineering"},
            ],
        },
        {
            "id": "R112118",
            "label": "Computer Sciences",
            "children": [
                {
                    "id": "R112125",
                    "label": "Machine Learning",
                    "children": [
                        {"id": "R112130", "label": "Computer Vision"},
                        {"id": "R112133", "label": "Natural Language Processing"},
                    ],
                },
                {"id": "R278", "label": "Information Science"},
            ],
        },
        {
            "id": "R57",
            "label": "Life Sciences",
            "children": [
                {"id": "R104", "label": "Bioinformatics"},
            ],
        },
    ],
}


@pytest.fixture
def index() -> TaxonomyIndex:
    return TaxonomyIndex.from_tree(TAXONOMY_TREE)

"""Seed Catalog - the conservation projects every fresh store starts with.

Invariants:
    - Ids are fixed (1, 2) so client bookmarks like /trade/1 stay valid
    - Values are strings; stores parse them into Decimal
"""

SEED_PROJECTS: tuple[dict, ...] = (
    {
        "id": 1,
        "name": "Amazon Rainforest Conservation",
        "description": "Protecting vital rainforest ecosystems",
        "location": "Brazil",
        "credits": "10000",
        "price": "25",
        "image_url": "https://images.unsplash.com/photo-1465146344425-f00d5f5c8f07",
    },
    {
        "id": 2,
        "name": "Wind Farm Initiative",
        "description": "Clean energy generation project",
        "location": "Texas, USA",
        "credits": "5000",
        "price": "20",
        "image_url": "https://images.unsplash.com/photo-1470071459604-3b5ec3a7fe05",
    },
)

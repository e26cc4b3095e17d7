"""Curated image assets keyed by niche, checked in table order."""

from dataclasses import dataclass

UNSPLASH_URL = "https://images.unsplash.com/{photo}?w=1920&q=80"

DEFAULT_HERO_IMAGE = "photo-1557683316-973673baf926"


@dataclass(frozen=True)
class Niche:
    name: str
    keywords: tuple
    project_type: str
    photos: tuple       # first entry is the hero image


NICHES = (
    Niche("bakery", ("bakery", "bread", "pastry"), "landing-page",
          ("photo-1509440159596-0249088772ff", "photo-1555507036-ab1f4038808a",
           "photo-1517433670267-30f41c41e0fe")),
    Niche("restaurant", ("restaurant", "food", "cafe"), "landing-page",
          ("photo-1517248135467-4c7edcad34c4", "photo-1414235077428-338989a2e8c0")),
    Niche("fitness", ("fitness", "gym"), "landing-page",
          ("photo-1534438327276-14e5300c3a48", "photo-1571019613454-1cb2f99b2d8b")),
    Niche("tech", ("tech", "saas", "software"), "saas",
          ("photo-1551288049-bebda4e38f71", "photo-1460925895917-afdab827c52f")),
    Niche("ecommerce", ("shop", "store", "ecommerce", "e-commerce"), "e-commerce",
          ("photo-1472851294608-062f824d29cc", "photo-1441986300917-64674bd600d8")),
    Niche("portfolio", ("portfolio", "creative"), "portfolio",
          ("photo-1558655146-d09347e92766", "photo-1561070791-2526d30994b5")),
    Niche("realestate", ("real estate", "realtor", "property"), "landing-page",
          ("photo-1600596542815-ffad4c1539a9", "photo-1600585154340-be6161a56a0c")),
    Niche("travel", ("travel", "tourism", "hotel"), "landing-page",
          ("photo-1507525428034-b723cf961d3e", "photo-1476514525535-07fb3b4ae5f1")),
)

DEFAULT_NICHE = Niche("default", (), "landing-page", (DEFAULT_HERO_IMAGE,))


def image_url(photo):
    return UNSPLASH_URL.format(photo=photo)

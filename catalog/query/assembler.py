"""Map planned pages of Product rows onto response schemas."""
from typing import Iterable

from catalog.data.models import Product
from catalog.query.planner import PlannedPage
from catalog.query.price_bounds import PriceBounds
from catalog.query.ratings import average_rating
from catalog.query.validation import PageRequest
from catalog.schemas import ProductPage, ProductResponse


def to_product_response(product: Product) -> ProductResponse:
    """Project a product, computing its rating and resolving its category name."""
    return ProductResponse(
        id=product.id,
        name=product.name,
        brand=product.brand,
        price=product.price,
        description=product.description,
        image=product.image,
        category=product.category_name,
        memory=product.memory,
        screen_size=product.screen_size,
        battery_capacity=product.battery_capacity,
        operating_system=product.operating_system,
        color=product.color,
        average_rating=average_rating(product.ratings),
        created_at=product.created_at,
        updated_at=product.updated_at,
    )


def assemble_page(planned: PlannedPage, page: PageRequest, bounds: PriceBounds) -> ProductPage:
    return ProductPage(
        total_elements=planned.total_elements,
        page_number=page.page_number,
        page_size=page.page_size,
        total_pages=planned.total_pages,
        is_first=page.page_number == 0,
        # An empty result has zero pages; page 0 of it is reported as last
        is_last=page.page_number >= planned.total_pages - 1,
        min_price=bounds.effective_min,
        max_price=bounds.effective_max,
        products=to_product_responses(planned.products),
    )


def to_product_responses(products: Iterable[Product]):
    return [to_product_response(p) for p in products]

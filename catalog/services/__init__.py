from catalog.services.filter_options import FilterOptionsService
from catalog.services.product_search import ProductSearchService

__all__ = ['FilterOptionsService', 'ProductSearchService']

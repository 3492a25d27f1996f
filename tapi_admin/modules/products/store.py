"""
Product Store
=============

Admin product collection: GET /product, POST /product/create,
PUT /product/edit/<id>.
"""

from ...core.resource_store import ResourceStore
from ...forms.session import FormSession
from .schema import PRODUCT_SCHEMA


class ProductStore(ResourceStore):

    kind = 'products'
    list_path = '/product'
    create_path = '/product/create'
    update_path = '/product/edit/{id}'

    def open_form(self, product=None):
        """New product form (create mode), or seeded from product (edit mode)"""
        return FormSession(PRODUCT_SCHEMA, store=self, resource=product)

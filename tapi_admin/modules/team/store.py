"""
Team Store
==========

Team member ("person") collection: GET /team, POST /team/create,
PUT /team/edit/<id>.
"""

from ...core.resource_store import ResourceStore
from ...forms.session import FormSession
from .schema import PERSON_SCHEMA


class TeamStore(ResourceStore):

    kind = 'team'
    list_path = '/team'
    create_path = '/team/create'
    update_path = '/team/edit/{id}'

    def open_form(self, person=None):
        return FormSession(PERSON_SCHEMA, store=self, resource=person)

"""
Product Form Schema
===================

Fields of the product editor. Benefits and applications are repeating
{point, description} entries sent as JSON; the main image and extra
images are sent as binary parts only when newly selected.
"""

from ...forms.fields import FileField, FileListField, FormSchema, ListField, TextField

PRODUCT_SCHEMA = FormSchema('products', [
    TextField('name', label='Product name'),
    TextField('description', label='Description'),
    ListField('benefits', keys=('point', 'description'), label='Benefits'),
    ListField('applications', keys=('point', 'description'), label='Applications'),
    FileField('mainImage', label='Main image', part_name='mainImage'),
    FileListField('extraImages', label='Extra images', part_name='extraImages'),
])

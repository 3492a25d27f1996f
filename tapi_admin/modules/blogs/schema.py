"""
Blog Form Schema
================

Fields of the blog editor. The banner image is mandatory when creating a
post and optional when editing (no new file keeps the stored banner).
"""

from ...core.config import Config
from ...forms.fields import (
    BooleanField, ChoiceField, FileField, FormSchema, TagsField, TextField,
)


class BlogSchema(FormSchema):

    def extra_parts(self, values):
        # The server indexes posts by blogName; it mirrors the title
        return [('blogName', values['title'])]


BLOG_SCHEMA = BlogSchema('blogs', [
    TextField('title', label='Title', max_length=200),
    TextField('excerpt', label='Excerpt', max_length=500),
    TextField('content', label='Content', min_length=50),
    ChoiceField('category', Config.BLOG_CATEGORIES, label='Category'),
    TagsField('tags', label='Tags'),
    BooleanField('published', label='Publish immediately'),
    FileField(
        'image', label='Banner image', source='blogImgUrl', part_name='blogImage',
        required_on_create=True, required_message='Please upload a banner image',
    ),
])

from ...forms.fields import FileField, FormSchema, TextField

# Stored portraits come back as imageUrl; a new one is uploaded as "image"
PERSON_SCHEMA = FormSchema('team', [
    TextField('name', label='Full name'),
    TextField('designation', label='Designation'),
    TextField('description', label='Short description'),
    FileField('image', label='Image', source='imageUrl', part_name='image'),
])

from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Hotel',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('slug', models.SlugField(max_length=100, unique=True)),
                ('description', models.TextField(blank=True, null=True)),
                ('time_zone', models.CharField(blank=True, max_length=64, null=True)),
                ('img_qr', models.CharField(
                    blank=True, max_length=500, null=True,
                    help_text='Absolute URL or /uploads/... path of the hotel QR image',
                )),
                ('metadata', models.JSONField(
                    blank=True, null=True,
                    help_text='Free-form contact/location data, e.g. {"contact": {...}, "location": {...}}',
                )),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'ordering': ['-created_at', '-id'],
            },
        ),
    ]

from django.contrib.auth.models import AbstractUser
from django.db import models


class Role(models.Model):
    authority = models.CharField(max_length=50, unique=True)

    class Meta:
        db_table = "roles"

    def __str__(self):
        return self.authority


class User(AbstractUser):
    # username holds the login e-mail; password, is_active, is_staff are inherited
    name = models.CharField(max_length=120, blank=True)
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=50, blank=True, null=True)
    birth_date = models.DateField(blank=True, null=True)
    roles = models.ManyToManyField(Role, related_name="users", blank=True)

    def __str__(self):
        return self.username

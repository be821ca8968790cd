from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from .models import User, StudentProfile, FacultyProfile


class StudentProfileInline(admin.StackedInline):
    model = StudentProfile
    can_delete = False
    extra = 0


class FacultyProfileInline(admin.StackedInline):
    model = FacultyProfile
    can_delete = False
    extra = 0


@admin.register(User)
class CustomUserAdmin(UserAdmin):
    list_display = ('username', 'email', 'role', 'first_name', 'last_name', 'is_staff')
    list_filter = ('role', 'is_staff', 'is_superuser', 'is_active')
    search_fields = ('username', 'email', 'first_name', 'last_name')
    inlines = [StudentProfileInline, FacultyProfileInline]
    fieldsets = UserAdmin.fieldsets + (
        ('Participant', {'fields': ('role',)}),
    )
    add_fieldsets = UserAdmin.add_fieldsets + (
        ('Participant', {'fields': ('email', 'role')}),
    )


@admin.register(StudentProfile)
class StudentProfileAdmin(admin.ModelAdmin):
    list_display = ('user', 'roll_number')
    search_fields = ('user__username', 'user__email', 'roll_number')


@admin.register(FacultyProfile)
class FacultyProfileAdmin(admin.ModelAdmin):
    list_display = ('user', 'employee_id', 'department')
    list_filter = ('department',)
    search_fields = ('user__username', 'user__email', 'employee_id')

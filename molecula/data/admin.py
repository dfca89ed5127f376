from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from molecula.data.models import (
    Answer,
    Option,
    Question,
    Response,
    Survey,
    User,
)


@admin.register(User)
class CustomUserAdmin(UserAdmin):  # type: ignore[type-arg]
    list_display = ("username", "email", "slug", "is_staff")
    prepopulated_fields = {"slug": ("username",)}
    fieldsets = (
        *UserAdmin.fieldsets,  # type: ignore[misc]
        ("Extra", {"fields": ("slug",)}),
    )
    add_fieldsets = (
        *UserAdmin.add_fieldsets,  # type: ignore[misc]
        ("Extra", {"fields": ("email", "slug")}),
    )


class QuestionInline(admin.TabularInline):  # type: ignore[type-arg]
    model = Question
    fields = ("position", "text", "kind", "required", "next_question_order")
    extra = 0


class OptionInline(admin.TabularInline):  # type: ignore[type-arg]
    model = Option
    fields = ("position", "text")
    extra = 0


@admin.register(Survey)
class SurveyAdmin(admin.ModelAdmin):  # type: ignore[type-arg]
    list_display = ("title", "owner", "deadline", "is_anonymous", "created_at")
    list_filter = ("is_anonymous",)
    search_fields = ("title", "description")
    raw_id_fields = ("owner",)
    inlines = [QuestionInline]  # pyright: ignore[reportUnknownVariableType]


@admin.register(Question)
class QuestionAdmin(admin.ModelAdmin):  # type: ignore[type-arg]
    list_display = ("survey", "position", "kind", "required", "next_question_order")
    list_filter = ("kind", "required")
    list_select_related = ("survey",)
    raw_id_fields = ("survey",)
    inlines = [OptionInline]  # pyright: ignore[reportUnknownVariableType]


class AnswerInline(admin.TabularInline):  # type: ignore[type-arg]
    model = Answer
    fields = ("question", "text_value", "number_value", "option")
    readonly_fields = fields
    extra = 0
    can_delete = False


@admin.register(Response)
class ResponseAdmin(admin.ModelAdmin):  # type: ignore[type-arg]
    list_display = ("survey", "respondent", "submitted_at")
    list_select_related = ("survey", "respondent")
    raw_id_fields = ("survey", "respondent")
    readonly_fields = ("submitted_at",)
    inlines = [AnswerInline]  # pyright: ignore[reportUnknownVariableType]


@admin.register(Answer)
class AnswerAdmin(admin.ModelAdmin):  # type: ignore[type-arg]
    list_display = ("response", "question", "text_value", "number_value", "option")
    list_select_related = ("response", "question", "option")
    raw_id_fields = ("response", "question", "option")

from backend.app.models.user import User


def test_user_model_has_quota_columns():
    column_names = {column.name for column in User.__table__.columns}
    expected = {
        "id",
        "email",
        "hashed_password",
        "plan_id",
        "invoice_quota",
        "invoices_used",
        "quote_quota",
        "quotes_used",
        "material_records_used",
        "subscription_status",
        "subscription_expires_at",
    }
    assert expected.issubset(column_names)


def test_user_model_primary_key():
    pk_columns = [column.name for column in User.__table__.primary_key.columns]
    assert pk_columns == ["id"]

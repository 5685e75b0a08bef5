from marshmallow import Schema, fields


class CalendarEntrySchema(Schema):
    id = fields.String(dump_only=True)
    symbol = fields.String(data_key="Symbol")
    company = fields.String(data_key="Company")
    purpose = fields.String(data_key="Purpose")
    event_date = fields.String(data_key="Date")
    original_purpose = fields.String(data_key="OriginalPurpose")
    created_at = fields.DateTime(data_key="createdAt", dump_only=True)


class CalendarUploadSchema(Schema):
    data = fields.Raw(required=True, metadata={"description": "Array of {Symbol, Company, Purpose, Date}"})


class CalendarSearchSchema(Schema):
    symbol = fields.String(load_default=None, allow_none=True)
    company = fields.String(load_default=None, allow_none=True)
    purposes = fields.List(fields.String(), load_default=None, allow_none=True)
    start_date = fields.Date(data_key="startDate", load_default=None, allow_none=True)
    end_date = fields.Date(data_key="endDate", load_default=None, allow_none=True)

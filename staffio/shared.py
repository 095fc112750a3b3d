MODEL_UPDATE_EVENT = "__updated__"
FIELD_RESET_EVENT = "__reset__"

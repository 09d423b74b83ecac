# One module per API resource. Pages import the submodule they need, e.g.
# `from services import patient_service`.

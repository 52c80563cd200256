# 📄 File: app/modules/plant_catalog/application/__init__.py
# 🧭 Purpose (Layman Explanation):
# Turns requests into catalog work: questions go to query handlers, changes to command
# handlers, and the engine offers both behind one object.
# 🧪 Purpose (Technical Summary):
# Application layer package (CQRS queries, commands, handlers, engine facade).
# 🔗 Dependencies:
# Domain layer, infrastructure layer
# 🔄 Connected Modules / Calls From:
# app.modules.plant_catalog (package exports), tests

from posdash.core.routes import BackendRoute, BODY_NONE, QUERY_NONE

LIST_EXPENSES = BackendRoute('expenses.list', 'expenses/', body=BODY_NONE)
CREATE_EXPENSE = BackendRoute('expenses.create', 'expenses/', 'POST', query=QUERY_NONE)
UPDATE_EXPENSE = BackendRoute('expenses.update', 'expenses/{id}', 'PUT', query=QUERY_NONE)
DELETE_EXPENSE = BackendRoute('expenses.delete', 'expenses/{id}', 'DELETE', body=BODY_NONE, query=QUERY_NONE)

LIST_EXPENSE_TYPES = BackendRoute('expense-type.list', 'expense-type/', body=BODY_NONE)

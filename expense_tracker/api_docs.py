from fastapi import APIRouter

router = APIRouter()


def _endpoint(method, path, description, response, **extra):
    entry = {"method": method, "path": path, "description": description, "response": response}
    entry.update(extra)
    return entry


API_DOCS = {
    "title": "Expense Tracker API",
    "version": "1.0",
    "description": "REST API for managing personal expenses",
    "authentication": "HTTP Basic on every route except /, /health, /api-docs, /register and /login",
    "endpoints": {
        "welcome": _endpoint("GET", "/", "Service status and welcome message", "Status object"),
        "health": _endpoint("GET", "/health", "Health check", "Status object"),
        "testAuth": _endpoint("GET", "/test-auth", "Check that the supplied credentials are valid", "String"),
        "getAllExpenses": _endpoint("GET", "/all", "Get all expenses of the caller", "List<Expense>"),
        "getByMonth": _endpoint(
            "GET", "/by-month/{yearMonth}", "Get the caller's expenses for a given month (YYYY-MM)",
            "List<Expense>", pathVariable="yearMonth (String)",
        ),
        "addExpense": _endpoint(
            "POST", "/add", "Create a new expense", "Expense",
            requestBody="Expense object (JSON)",
            validation="expense, expenseType and expenseAmount are required",
        ),
        "updateExpense": _endpoint(
            "PUT", "/updateExpense", "Update an existing expense owned by the caller", "Expense",
            requestBody="Expense object with ID (JSON)",
            validation="id, expense, expenseType and expenseAmount are required",
        ),
        "deleteExpense": _endpoint(
            "DELETE", "/delete/{id}", "Delete an expense owned by the caller", "String",
            pathVariable="id (Integer)",
        ),
        "register": _endpoint(
            "POST", "/register", "Register a new user", "User (password omitted)",
            requestBody="{username, password, role?}",
        ),
        "login": _endpoint("POST", "/login", "Verify Basic credentials", "User (password omitted)"),
    },
    "expenseModel": {
        "id": "Integer (auto-generated)",
        "expense": "String (required, max 100 chars)",
        "expenseType": "String (required, max 50 chars)",
        "expenseAmount": "String (required, max 20 chars)",
        "paymentMethod": "String (optional)",
        "date": "ISO date (defaults to today)",
    },
    "exampleRequest": {
        "expense": "Groceries",
        "expenseType": "Food",
        "expenseAmount": "50.00",
    },
}


@router.get("/api-docs")
def get_api_documentation():
    return API_DOCS

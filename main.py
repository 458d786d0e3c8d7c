from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from db import init_db
from routes import calendar, forecast

app = FastAPI()


@app.on_event("startup")
def startup():
    init_db()


@app.get("/")
def root():
    return RedirectResponse(url="/api/calendar")


app.include_router(calendar.router)
app.include_router(forecast.router)

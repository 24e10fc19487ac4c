"""Starter queries offered in the playground editor."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ExampleQuery:
    name: str
    description: str
    query: str


EXAMPLE_QUERIES: tuple[ExampleQuery, ...] = (
    ExampleQuery(
        name="Daily Active Users",
        description="Count unique users per day for the last 30 days",
        query="""-- Daily Active Users (last 30 days)
SELECT
  ist_date,
  uniq(pixel_properties_user_id) as dau
FROM app_events
WHERE ist_date >= today() - 30
GROUP BY ist_date
ORDER BY ist_date;""",
    ),
    ExampleQuery(
        name="Top Events",
        description="Top 10 events by count in the last 7 days",
        query="""-- Top 10 Events by Count
SELECT
  event_name,
  count(*) as count
FROM app_events
WHERE ist_date >= today() - 7
GROUP BY event_name
ORDER BY count DESC
LIMIT 10;""",
    ),
    ExampleQuery(
        name="Hourly Distribution",
        description="Event distribution by hour for today",
        query="""-- Hourly Event Distribution (today)
SELECT
  toHour(server_timestamp) as hour,
  count(*) as events
FROM app_events
WHERE ist_date = today()
GROUP BY hour
ORDER BY hour;""",
    ),
    ExampleQuery(
        name="Top Cities",
        description="Top 10 cities by unique users",
        query="""-- Top 10 Cities by Unique Users
SELECT
  JSONExtractString(pixel_properties, 'cf_city') as city,
  uniq(pixel_properties_user_id) as users
FROM app_events
WHERE ist_date >= today() - 7 AND city != ''
GROUP BY city
ORDER BY users DESC
LIMIT 10;""",
    ),
    ExampleQuery(
        name="Event Properties",
        description="Explore all properties for a specific event",
        query="""-- Event Properties Explorer
SELECT
  event_name,
  count(*) as event_count,
  uniq(pixel_properties_user_id) as unique_users,
  groupUniqArray(10)(JSONExtractString(pixel_properties, 'cf_country')) as top_countries
FROM app_events
WHERE ist_date >= today() - 7
  AND event_name = 'app_open'
GROUP BY event_name;""",
    ),
    ExampleQuery(
        name="User Journey",
        description="First 5 events for each user",
        query="""-- User Journey (first 5 events per user)
SELECT
  pixel_properties_user_id,
  groupArray(5)(event_name) as event_sequence,
  min(server_timestamp) as first_event_time
FROM app_events
WHERE ist_date >= today() - 1
  AND pixel_properties_user_id != ''
GROUP BY pixel_properties_user_id
LIMIT 100;""",
    ),
)


def get_example_queries() -> list[ExampleQuery]:
    return list(EXAMPLE_QUERIES)

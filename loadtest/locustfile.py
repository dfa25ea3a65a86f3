from locust import HttpUser, task, between, events
import random

HOT = [
    "algiers","paris","london","new york","tokyo",
    "berlin","madrid","cairo","sydney","toronto"
]
LONG_TAIL = [
    "oran","constantine","annaba","tlemcen","lyon","marseille","bordeaux","porto","seville","bologna",
    "ghent","utrecht","graz","brno","tartu","kaunas","split","plovdiv","cluj","timisoara"
]

def pick_city():
    # 80/20 split between popular and rare places
    return random.choice(HOT) if random.random() < 0.8 else random.choice(LONG_TAIL)

def typed_prefixes(city):
    # what the autosuggest box sees while someone types "par" -> "pari" -> "paris"
    return [city[:n] for n in range(2, len(city) + 1)]

class WidgetUser(HttpUser):
    wait_time = between(0.05, 0.25)

    @task(3)
    def type_and_suggest(self):
        for prefix in typed_prefixes(pick_city()):
            with self.client.get("/suggest", params={"q": prefix}, name="/suggest", catch_response=True) as resp:
                if resp.status_code != 200:
                    resp.failure(f"Unexpected status {resp.status_code}")

    @task(1)
    def get_weather(self):
        city = pick_city()
        with self.client.get("/weather", params={"city": city}, name="/weather", catch_response=True) as resp:
            if resp.status_code not in (200, 502):
                resp.failure(f"Unexpected status {resp.status_code}")

@events.test_stop.add_listener
def on_test_stop(environment, **_kwargs):
    try:
        r = environment.runner.client.get("/stats")
        print("\n--- /stats ---\n", r.text)
    except Exception:
        pass

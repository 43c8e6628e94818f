"""Protocol meals with premium and budget recipes."""

from habitforge.domain.metrics import Meal, MealVersion


MEALS: tuple[Meal, ...] = (
    Meal(
        id="super-veggie",
        name="Super Veggie",
        calories=450,
        protein=25,
        prep_time_minutes=15,
        premium_version=MealVersion(
            ingredients=(
                "Black lentils",
                "Broccoli (organic)",
                "Cauliflower (organic)",
                "Shiitake mushrooms",
                "Garlic",
                "Extra virgin olive oil",
                "Hemp seeds",
            ),
            cost_per_serving=8.5,
        ),
        budget_version=MealVersion(
            ingredients=(
                "Green lentils",
                "Frozen broccoli",
                "Frozen cauliflower",
                "Button mushrooms",
                "Garlic",
                "Olive oil",
                "Sunflower seeds",
            ),
            cost_per_serving=2.5,
            swaps=(
                "Green lentils instead of black (same nutrition)",
                "Frozen veggies are flash-frozen at peak nutrition",
                "Button mushrooms have similar benefits",
            ),
        ),
    ),
    Meal(
        id="nutty-pudding",
        name="Nutty Pudding",
        calories=500,
        protein=30,
        prep_time_minutes=10,
        premium_version=MealVersion(
            ingredients=(
                "Macadamia nut milk",
                "Ground macadamia nuts",
                "Walnuts",
                "Chia seeds",
                "Flax seeds",
                "Blueberries (organic)",
                "Pomegranate seeds",
            ),
            cost_per_serving=12,
        ),
        budget_version=MealVersion(
            ingredients=(
                "Unsweetened almond milk",
                "Peanut butter",
                "Walnuts",
                "Chia seeds",
                "Ground flax",
                "Frozen blueberries",
                "Banana",
            ),
            cost_per_serving=3,
            swaps=(
                "Almond milk + peanut butter for macadamia",
                "Frozen berries are just as nutritious",
                "Banana for natural sweetness + potassium",
            ),
        ),
    ),
    Meal(
        id="green-smoothie",
        name="Green Giant Smoothie",
        calories=350,
        protein=20,
        prep_time_minutes=5,
        premium_version=MealVersion(
            ingredients=(
                "Collagen peptides",
                "Spirulina",
                "Chlorella",
                "Spinach (organic)",
                "Kale (organic)",
                "Coconut water",
                "MCT oil",
            ),
            cost_per_serving=10,
        ),
        budget_version=MealVersion(
            ingredients=(
                "Unflavored protein powder",
                "Frozen spinach",
                "Banana",
                "Peanut butter",
                "Water",
                "Cinnamon",
            ),
            cost_per_serving=2,
            swaps=(
                "Skip expensive superfoods - spinach has similar benefits",
                "Protein powder instead of collagen",
                "Water instead of coconut water",
            ),
        ),
    ),
)

"""Human-readable metric definitions for the app."""

METRIC_GUIDE = [
    {
        "Metric": "Turnaround Time (Hours)",
        "Meaning": "Elapsed hours between receipt for QC and QC completion.",
        "Formula": "Date & Time QC Finished - Date & Time Received for QC",
    },
    {
        "Metric": "Target Efficiency (98%)",
        "Meaning": "Target duration reflecting 98% productivity for this specific turnaround.",
        "Formula": "Turnaround Time x 0.98",
    },
    {
        "Metric": "Actual Efficiency",
        "Meaning": "How closely the actual turnaround aligns with its 98% productivity goal.",
        "Formula": "(ROUND OFF Target Productivity Hours / Turnaround Time) x 100",
    },
    {
        "Metric": "Efficiency Result",
        "Meaning": "MET TARGET when actual efficiency reaches the fixed target, else BELOW TARGET.",
        "Formula": "Actual Efficiency >= 98%",
    },
    {
        "Metric": "Avg Turnaround Time",
        "Meaning": "Mean turnaround over visible items with a valid turnaround time.",
        "Formula": "mean(valid Turnaround Time)",
    },
    {
        "Metric": "Avg Actual Efficiency",
        "Meaning": "Mean efficiency over visible items with a numeric efficiency.",
        "Formula": "mean(valid Actual Efficiency)",
    },
    {
        "Metric": "N/A",
        "Meaning": "A required date is missing, so the value cannot be derived.",
        "Formula": "-",
    },
    {
        "Metric": "Invalid",
        "Meaning": "QC finish time is before QC receive time.",
        "Formula": "Finished < Received",
    },
    {
        "Metric": "Error",
        "Meaning": "Turnaround time is zero, so efficiency would divide by zero.",
        "Formula": "Turnaround Time = 0",
    },
]

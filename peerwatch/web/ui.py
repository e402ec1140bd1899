HTML = """
<!doctype html>
<html>
<head>
  <meta charset="utf-8"/>
  <title>Peers</title>
  <style>
    body { background:#14181d; color:#e8eaed; font-family: ui-sans-serif,system-ui,Segoe UI,Arial; }
    table { border-collapse: collapse; width: 100%; }
    th, td { text-align:left; padding:4px 10px; border-bottom:1px solid #2a2f36; }
    th { cursor:pointer; user-select:none; }
    td.num { text-align:right; font-variant-numeric: tabular-nums; }
    tr.sel { background:#2a3f5c; }
    #status { color:#9aa0a6; font-size: 0.9em; }
  </style>
</head>
<body>
  <h2>Peers (Live)</h2>
  <div id="status"></div>
  <table>
    <thead><tr id="head"></tr></thead>
    <tbody id="rows"></tbody>
  </table>

  <script>
  const INTERVAL_MS = __INTERVAL_MS__;
  let selected = null;   // node_id, survives reordering
  let sort = {column: "none", order: "asc"};

  function header(columns) {
    const tr = document.getElementById('head');
    tr.innerHTML = '';
    for (const c of columns) {
      const th = document.createElement('th');
      let mark = '';
      if (sort.column === c.id) mark = sort.order === 'asc' ? ' ▲' : ' ▼';
      th.textContent = c.label + mark;
      th.onclick = () => requestSort(c.id);
      tr.appendChild(th);
    }
  }

  function body(rows) {
    const tb = document.getElementById('rows');
    tb.innerHTML = '';
    let found = false;
    for (const r of rows) {
      const tr = document.createElement('tr');
      tr.dataset.node = r.node_id;
      if (r.node_id === selected) { tr.className = 'sel'; found = true; }
      for (const [v, cls] of [[r.address, ''], [r.sub_version, ''], [r.ping, 'num']]) {
        const td = document.createElement('td');
        td.textContent = v;
        if (cls) td.className = cls;
        tr.appendChild(td);
      }
      tr.onclick = () => { selected = r.node_id; body(rows); };
      tb.appendChild(tr);
    }
    // selected peer went away
    if (!found) selected = null;
  }

  async function load() {
    try {
      const r = await fetch('/api/peers', {cache: 'no-store'});
      const data = await r.json();
      sort = data.sort;
      header(data.columns);
      body(data.rows);
      document.getElementById('status').textContent =
        `${data.rows.length} peers, ${data.state}`;
    } catch (err) {
      console.warn('[peers] refresh failed:', err);
    }
  }

  async function requestSort(column) {
    const order = (sort.column === column && sort.order === 'asc') ? 'desc' : 'asc';
    await fetch('/api/sort', {
      method: 'POST',
      headers: {'Content-Type': 'application/json'},
      body: JSON.stringify({column, order}),
    });
    await load();
  }

  load();
  setInterval(load, INTERVAL_MS);
  </script>
</body>
</html>
"""

def render_html(interval: float) -> str:
    return HTML.replace("__INTERVAL_MS__", str(int(interval * 1000)))
